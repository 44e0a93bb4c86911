"""Repository pattern implementation for data access layer."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, selectinload

from wikitree.models.content_block import ContentBlock
from wikitree.models.section import Section


class SectionRepository:
    """Repository for section operations with hierarchical query support."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, section: Section) -> Section:
        """Create a new section."""
        self.session.add(section)
        self.session.flush()
        return section

    def get_by_id(self, section_id: str) -> Optional[Section]:
        """Get section by ID."""
        return self.session.get(Section, section_id)

    def get_all_with_content(self) -> list[Section]:
        """
        Get every section with its content blocks loaded.

        Rows come back in storage order; sibling ordering is the tree
        assembler's job.
        """
        stmt = select(Section).options(selectinload(Section.content_blocks))
        return list(self.session.scalars(stmt))

    def count_children(self, section_id: str) -> int:
        """Count direct children of a section."""
        stmt = select(func.count(Section.id)).where(Section.parent_id == section_id)
        return self.session.scalar(stmt) or 0

    def get_child_positions(
        self, parent_id: Optional[str], exclude_id: Optional[str] = None
    ) -> list[int]:
        """Get the positions used under a parent, optionally ignoring one section."""
        stmt = select(Section.position).where(self._parent_clause(parent_id))
        if exclude_id is not None:
            stmt = stmt.where(Section.id != exclude_id)
        return list(self.session.scalars(stmt))

    def get_parent_pairs(self) -> list[tuple[str, Optional[str]]]:
        """Get (id, parent_id) for every section, siblings in position order."""
        stmt = select(Section.id, Section.parent_id).order_by(Section.position, Section.id)
        return [(row.id, row.parent_id) for row in self.session.execute(stmt)]

    def update(self, section: Section) -> Section:
        """Update an existing section."""
        self.session.flush()
        return section

    def delete_many(self, section_ids: Iterable[str]) -> int:
        """Delete sections by ID in one statement. Returns the number of rows removed."""
        ids = list(section_ids)
        if not ids:
            return 0
        result = self.session.execute(delete(Section).where(Section.id.in_(ids)))
        return result.rowcount or 0

    def count(self) -> int:
        """Count all sections."""
        return self.session.scalar(select(func.count(Section.id))) or 0

    @staticmethod
    def _parent_clause(parent_id: Optional[str]):
        if parent_id is None:
            return Section.parent_id.is_(None)
        return Section.parent_id == parent_id


class ContentBlockRepository:
    """Repository for content block operations."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def get_by_section_id(self, section_id: str) -> list[ContentBlock]:
        """Get all blocks of a section ordered by ``order``."""
        stmt = (
            select(ContentBlock)
            .where(ContentBlock.section_id == section_id)
            .order_by(ContentBlock.order)
        )
        return list(self.session.scalars(stmt))

    def count_for_section(self, section_id: str) -> int:
        """Count the blocks owned by a section."""
        stmt = select(func.count(ContentBlock.id)).where(ContentBlock.section_id == section_id)
        return self.session.scalar(stmt) or 0

    def count_for_sections(self, section_ids: Iterable[str]) -> int:
        """Count the blocks owned by any of the given sections."""
        ids = list(section_ids)
        if not ids:
            return 0
        stmt = select(func.count(ContentBlock.id)).where(ContentBlock.section_id.in_(ids))
        return self.session.scalar(stmt) or 0

    def delete_for_sections(self, section_ids: Iterable[str]) -> int:
        """Delete every block owned by the given sections. Returns the number of rows removed."""
        ids = list(section_ids)
        if not ids:
            return 0
        result = self.session.execute(
            delete(ContentBlock).where(ContentBlock.section_id.in_(ids))
        )
        return result.rowcount or 0
