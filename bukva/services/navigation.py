"""
Learner drill-down through the section tree.

The breadcrumb path is plain state passed in and returned by each call, so
several learners (or tests) never share a hidden stack.
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

SECTIONS_VIEW = "sections"
EXERCISES_VIEW = "exercises"


@dataclass(frozen=True)
class Crumb:
    id: int
    name: str


@dataclass(frozen=True)
class NavigationState:
    path: Tuple[Crumb, ...] = ()

    @property
    def current_id(self) -> Optional[int]:
        return self.path[-1].id if self.path else None

    @property
    def level(self) -> int:
        return len(self.path) + 1

    def enter(self, section: Any) -> "NavigationState":
        """Step into a section (ORM row, mapping or Crumb)"""
        if isinstance(section, dict):
            crumb = Crumb(id=section["id"], name=section["name"])
        else:
            crumb = Crumb(id=section.id, name=section.name)
        return NavigationState(path=self.path + (crumb,))

    def back(self) -> "NavigationState":
        return NavigationState(path=self.path[:-1])

    def jump(self, index: int) -> "NavigationState":
        """Keep crumbs up to and including index, like clicking a breadcrumb"""
        if index < 0 or index >= len(self.path):
            raise IndexError(f"No breadcrumb at position {index}")
        return NavigationState(path=self.path[:index + 1])


def decide_view(state: NavigationState, children: Sequence[Any]) -> str:
    """A non-root section without visible children is a leaf: show its exercises"""
    if not children and state.current_id is not None:
        return EXERCISES_VIEW
    return SECTIONS_VIEW
