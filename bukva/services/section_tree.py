"""
Section tree assembly and projections.

Everything here is a pure function over an already fetched list of section
rows. Rows may be ORM instances or plain mappings, as long as they expose
id, name, parent_id, order_index and is_active.
"""
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel


class SectionNode(BaseModel):
    id: int
    name: str
    parent_id: Optional[int] = None
    order_index: int = 0
    is_active: bool = True
    children: List["SectionNode"] = []


SectionNode.model_rebuild()


class FlatSection(BaseModel):
    id: int
    name: str
    is_active: bool
    depth: int


def _value(row: Any, field: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(field)
    return getattr(row, field, None)


def sibling_key(row: Any):
    """Sort key giving the total sibling order: order_index, then id"""
    return (_value(row, "order_index") or 0, _value(row, "id"))


def build_tree(rows: Iterable[Any], include_inactive: bool = False) -> List[SectionNode]:
    """
    Turn flat section rows into a forest of SectionNode.

    Inactive rows are dropped before indexing when include_inactive is False,
    so active children of an inactive parent come back as roots. A row whose
    parent_id is None, points at itself, or does not resolve to a retained row
    is a root. Siblings are sorted by (order_index, id) at every level.

    Malformed parent references never raise; they only change placement.
    """
    by_id: Dict[int, SectionNode] = {}
    for row in rows:
        is_active = bool(_value(row, "is_active"))
        if not include_inactive and not is_active:
            continue
        node = SectionNode(
            id=_value(row, "id"),
            name=_value(row, "name"),
            parent_id=_value(row, "parent_id"),
            order_index=_value(row, "order_index") or 0,
            is_active=is_active,
            children=[],
        )
        by_id[node.id] = node

    roots: List[SectionNode] = []
    for node in by_id.values():
        parent = by_id.get(node.parent_id) if node.parent_id is not None else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)

    # Sort every children list directly instead of recursing from the roots,
    # so nodes caught in a corrupt parent loop cannot cause infinite recursion
    roots.sort(key=sibling_key)
    for node in by_id.values():
        node.children.sort(key=sibling_key)

    return roots


def flatten(forest: Iterable[SectionNode], depth: int = 0) -> List[FlatSection]:
    """
    Pre-order walk of the forest for flat pickers (e.g. a <select>).

    Names are indented with two spaces per level. is_active is passed through
    untouched; marking inactive entries is left to the caller.
    """
    result: List[FlatSection] = []
    for node in forest:
        result.append(FlatSection(
            id=node.id,
            name=f"{'  ' * depth}{node.name}",
            is_active=node.is_active,
            depth=depth,
        ))
        result.extend(flatten(node.children, depth + 1))
    return result


def list_children(rows: Iterable[Any], parent_id: Optional[int], include_inactive: bool = False) -> List[Any]:
    """Direct children of parent_id (top-level sections when None), one level only"""
    children = [
        row for row in rows
        if _value(row, "parent_id") == parent_id
        and (include_inactive or bool(_value(row, "is_active")))
    ]
    children.sort(key=sibling_key)
    return children


def would_create_cycle(rows: Iterable[Any], section_id: int, new_parent_id: Optional[int]) -> bool:
    """
    True if giving section_id the parent new_parent_id would break the forest.

    Walks up from new_parent_id; stops at a root, a dangling reference or an
    already visited id.
    """
    if new_parent_id is None:
        return False
    if new_parent_id == section_id:
        return True

    parents = {_value(row, "id"): _value(row, "parent_id") for row in rows}
    seen = set()
    current = new_parent_id
    while current is not None and current in parents and current not in seen:
        if current == section_id:
            return True
        seen.add(current)
        current = parents[current]
    return False


def ancestor_path(rows: Iterable[Any], section_id: int) -> List[Any]:
    """Rows from the top-level ancestor down to section_id; empty if unknown"""
    by_id = {_value(row, "id"): row for row in rows}
    path = []
    seen = set()
    current = section_id
    while current is not None and current in by_id and current not in seen:
        seen.add(current)
        row = by_id[current]
        path.append(row)
        current = _value(row, "parent_id")
    path.reverse()
    return path
