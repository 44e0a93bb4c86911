"""Section model for storing the hierarchical wiki tree."""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wikitree.models.base import Base, TimestampMixin


class Section(Base, TimestampMixin):
    """Section model representing a node in the wiki tree.

    A section is either a leaf (may own content blocks) or internal (owns
    child sections), never both.
    """

    __tablename__ = "sections"
    __table_args__ = (
        UniqueConstraint("parent_id", "position", name="uq_sections_parent_position"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    parent_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    parent: Mapped[Optional["Section"]] = relationship(
        "Section", remote_side=[id], back_populates="children"
    )
    children: Mapped[list["Section"]] = relationship(
        "Section",
        back_populates="parent",
        order_by="Section.position",
        passive_deletes=True,
    )
    content_blocks: Mapped[list["ContentBlock"]] = relationship(
        "ContentBlock",
        back_populates="section",
        order_by="ContentBlock.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Section(id={self.id!r}, title={self.title!r}, parent_id={self.parent_id!r})>"
