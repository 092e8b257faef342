from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from bukva.database import Base


class Section(Base):
    __tablename__ = "sections"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)  # e.g. "Present Simple"
    parent_id = Column(Integer, ForeignKey("sections.id", ondelete="SET NULL"), nullable=True, index=True)  # NULL for top-level sections
    order_index = Column(Integer, nullable=False, default=0)  # Sibling order, ties broken by id
    is_active = Column(Boolean, default=True, nullable=False)  # Soft delete flag
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    exercises = relationship("Exercise", back_populates="section")
