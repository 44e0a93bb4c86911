"""Content block model for storing ordered, typed content of leaf sections."""

from typing import Any

from sqlalchemy import ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wikitree.models.base import Base


class ContentBlock(Base):
    """One typed unit of content inside a leaf section.

    ``payload`` holds the type-specific fields exactly as produced by
    :func:`wikitree.schemas.content.block_payload`.
    """

    __tablename__ = "content_blocks"
    __table_args__ = (
        UniqueConstraint("section_id", "order", name="uq_content_blocks_section_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    section_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    section: Mapped["Section"] = relationship("Section", back_populates="content_blocks")

    def __repr__(self) -> str:
        return f"<ContentBlock(section_id={self.section_id!r}, order={self.order}, type={self.type!r})>"
