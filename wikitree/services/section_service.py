"""Section service layer: the only component that mutates the section tree."""

import logging
from datetime import date
from typing import Any, Optional, Sequence

from sqlalchemy.orm import Session

from wikitree.exceptions import (
    DatabaseError,
    InvalidHierarchyError,
    ConflictError,
    NotFoundError,
    ValidationError,
    WikiServiceError,
)
from wikitree.models.base import utc_now
from wikitree.models.content_block import ContentBlock
from wikitree.models.section import Section
from wikitree.schemas.content import ContentBlockType, block_payload, parse_content
from wikitree.schemas.section import SectionView, TimelineEntry
from wikitree.services.events import TreeChangeEvent, TreeChangeKind, TreeEvents
from wikitree.services.section.descendants import DescendantResolver
from wikitree.services.section.navigation import (
    collect_leaf_paths,
    find_path_to_section,
    find_section_by_id,
    find_section_by_path,
    first_leaf_path,
)
from wikitree.services.section.positions import PositionAllocator
from wikitree.services.section.timeline import build_timeline
from wikitree.services.section.tree_operations import SectionRow, TreeAssembler
from wikitree.services.section.validation import SectionValidator
from wikitree.storage.repositories import ContentBlockRepository, SectionRepository

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Marks an update argument that was not supplied (distinct from an explicit None).
UNSET: Any = _Unset()


class SectionService:
    """Service layer for section CRUD operations with validation and error handling.

    Each mutating call is one transaction on the given session: all checks
    and writes happen inside it, it is committed on success and rolled back
    on any failure.
    """

    def __init__(self, session: Session, events: TreeEvents | None = None):
        """
        Initialize section service with database session.

        Args:
            session: SQLAlchemy database session
            events: Optional hub notified after each committed mutation
        """
        self.session = session
        self.events = events
        self.section_repo = SectionRepository(session)
        self.block_repo = ContentBlockRepository(session)
        self.validator = SectionValidator()
        self.allocator = PositionAllocator(self.section_repo)
        self.resolver = DescendantResolver(self.section_repo)
        self.assembler = TreeAssembler()

    def create_section(
        self,
        section_id: str,
        title: str,
        summary: str | None = None,
        parent_id: str | None = None,
        position: int | None = None,
        content: Sequence[Any] | None = None,
    ) -> Section:
        """
        Create a new section.

        Args:
            section_id: Caller-supplied unique ID (required)
            title: Section title (required, non-empty)
            summary: Optional summary
            parent_id: Optional parent section ID (None for root level)
            position: Order among siblings (default: max sibling position + 1)
            content: Optional content blocks (raw dicts or parsed blocks)

        Returns:
            Created section

        Raises:
            ValidationError: If any field is invalid or the position is taken
            ConflictError: If a section with the same ID already exists
            NotFoundError: If the parent section is not found
            InvalidHierarchyError: If the parent owns content blocks
            DatabaseError: If database operation fails
        """
        self.validator.validate_id(section_id)
        self.validator.validate_title(title)
        if summary is not None:
            self.validator.validate_summary(summary)
        if parent_id is not None:
            self.validator.validate_id(parent_id, "parent_id")
        if position is not None:
            self.validator.validate_position(position)
        blocks = parse_content(content) if content is not None else []

        try:
            if self.section_repo.get_by_id(section_id) is not None:
                raise ConflictError("Section", "id", section_id)

            if parent_id is not None:
                if self.section_repo.get_by_id(parent_id) is None:
                    raise NotFoundError("Section", parent_id)
                if self.block_repo.count_for_section(parent_id) > 0:
                    raise InvalidHierarchyError(
                        f"Cannot add a child to section '{parent_id}' because it has content",
                        parent_id,
                    )

            if position is None:
                position = self.allocator.allocate(parent_id)
            elif self.allocator.is_taken(parent_id, position):
                raise ValidationError(
                    f"Position {position} is already used by a sibling", "position"
                )

            now = utc_now()
            section = Section(
                id=section_id,
                title=title,
                summary=summary,
                parent_id=parent_id,
                position=position,
                added_at=now,
                updated_at=now,
                content_blocks=self._build_blocks(blocks),
            )
            self.section_repo.create(section)
            self.session.commit()

        except WikiServiceError:
            self.session.rollback()
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create section: {str(e)}", e) from e

        logger.info("Created section %s (parent=%s, position=%d)", section_id, parent_id, position)
        self._emit(TreeChangeKind.CREATED, [section_id])
        return section

    def list_sections(self) -> list[SectionView]:
        """
        Get the whole tree, assembled.

        Returns:
            Root-level sections with nested children

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            return self._assemble()
        except WikiServiceError:
            raise
        except Exception as e:
            raise DatabaseError(f"Failed to list sections: {str(e)}", e) from e

    def get_section(self, section_id: str) -> SectionView:
        """
        Get one section as it appears in the assembled tree.

        Raises:
            NotFoundError: If section is not found
            DatabaseError: If database operation fails
        """
        self._require_storable(section_id)
        section = find_section_by_id(section_id, self.list_sections())
        if section is None:
            raise NotFoundError("Section", section_id)
        return section

    def get_section_by_path(self, path: Sequence[str]) -> tuple[SectionView, list[str]]:
        """
        Resolve a root-to-node path of section IDs.

        Args:
            path: Section IDs from the root level downwards

        Returns:
            The section and the path to the first leaf beneath it

        Raises:
            NotFoundError: If the path does not lead to a section
            DatabaseError: If database operation fails
        """
        section = find_section_by_path(path, self.list_sections())
        if section is None:
            raise NotFoundError("Section", "/".join(path))
        return section, first_leaf_path(section, path)

    def get_section_path(self, section_id: str) -> list[str]:
        """
        Get the root-to-node ID path that addresses a section.

        Raises:
            NotFoundError: If section is not found
            DatabaseError: If database operation fails
        """
        self._require_storable(section_id)
        path = find_path_to_section(section_id, self.list_sections())
        if path is None:
            raise NotFoundError("Section", section_id)
        return path

    def landing_path(self, sections: Optional[Sequence[SectionView]] = None) -> list[str]:
        """Path to the first leaf of the whole tree in reading order; empty for an empty tree."""
        leaves = collect_leaf_paths(self.list_sections() if sections is None else sections)
        return leaves[0][0] if leaves else []

    def timeline(
        self,
        root_id: Optional[str] = None,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> list[TimelineEntry]:
        """
        List every leaf, most recently changed first.

        Args:
            root_id: Only list leaves under this root section
            since: Only list leaves last changed on or after this day
            until: Only list leaves last changed on or before this day

        Returns:
            Timeline entries

        Raises:
            ValidationError: If since is later than until
            DatabaseError: If database operation fails
        """
        if since is not None and until is not None and since > until:
            raise ValidationError("since must not be later than until", "since")
        return build_timeline(self.list_sections(), root_id=root_id, since=since, until=until)

    def update_section(
        self,
        section_id: str,
        title: str | None = None,
        summary: str | None = None,
        parent_id: str | None = UNSET,
        position: int | None = None,
        content: Sequence[Any] | None = None,
    ) -> Section:
        """
        Partially update a section, possibly moving it.

        Args:
            section_id: Section ID
            title: New title (optional)
            summary: New summary (optional)
            parent_id: New parent ID; None moves the section to the root
                level, UNSET leaves the parent unchanged
            position: New position (optional; recomputed when the parent
                changes and no position is given)
            content: Replacement content blocks (optional, replaces all)

        Returns:
            Updated section

        Raises:
            ValidationError: If any field is invalid or the position is taken
            NotFoundError: If the section or the new parent is not found
            InvalidHierarchyError: If content is set on a non-leaf section,
                the move would create a cycle, or the new parent has content
            DatabaseError: If database operation fails
        """
        self._require_storable(section_id)
        if title is not None:
            self.validator.validate_title(title)
        if summary is not None:
            self.validator.validate_summary(summary)
        if parent_id is not UNSET and parent_id is not None:
            self.validator.validate_id(parent_id, "parent_id")
        if position is not None:
            self.validator.validate_position(position)
        blocks = parse_content(content) if content is not None else None

        try:
            section = self.section_repo.get_by_id(section_id)
            if section is None:
                raise NotFoundError("Section", section_id)

            if blocks is not None and self.section_repo.count_children(section_id) > 0:
                raise InvalidHierarchyError(
                    "Cannot set content on a non-leaf section. Remove or move its children first.",
                    section_id,
                )

            target_parent_id = section.parent_id if parent_id is UNSET else parent_id
            parent_changed = target_parent_id != section.parent_id

            if parent_changed and target_parent_id is not None:
                if self.section_repo.get_by_id(target_parent_id) is None:
                    raise NotFoundError("Section", target_parent_id)
                if self.resolver.would_create_cycle(section_id, target_parent_id):
                    raise InvalidHierarchyError(
                        "Cannot move section under itself or one of its descendants",
                        section_id,
                    )
                if self.block_repo.count_for_section(target_parent_id) > 0:
                    raise InvalidHierarchyError(
                        f"Cannot move section under '{target_parent_id}' because it has content",
                        section_id,
                    )

            if position is not None:
                if self.allocator.is_taken(target_parent_id, position, exclude_id=section_id):
                    raise ValidationError(
                        f"Position {position} is already used by a sibling", "position"
                    )
                section.position = position
            elif parent_changed:
                section.position = self.allocator.allocate(target_parent_id, exclude_id=section_id)

            if title is not None:
                section.title = title
            if summary is not None:
                section.summary = summary
            section.parent_id = target_parent_id

            if blocks is not None:
                # Old rows must be gone before new ones reuse their orders.
                section.content_blocks.clear()
                self.session.flush()
                section.content_blocks.extend(self._build_blocks(blocks))

            section.updated_at = utc_now()
            self.section_repo.update(section)
            self.session.commit()

        except WikiServiceError:
            self.session.rollback()
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to update section: {str(e)}", e) from e

        logger.info("Updated section %s", section_id)
        self._emit(TreeChangeKind.UPDATED, [section_id])
        return section

    def delete_section(self, section_id: str) -> list[str]:
        """
        Delete a section together with its entire subtree.

        Args:
            section_id: Section ID

        Returns:
            Removed IDs: the section first, then its descendants breadth-first

        Raises:
            NotFoundError: If section is not found
            DatabaseError: If database operation fails
        """
        self._require_storable(section_id)

        try:
            if self.section_repo.get_by_id(section_id) is None:
                raise NotFoundError("Section", section_id)

            removed = [section_id, *self.resolver.descendants_of(section_id)]
            self.block_repo.delete_for_sections(removed)
            self.section_repo.delete_many(removed)
            self.session.commit()

        except WikiServiceError:
            self.session.rollback()
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to delete section: {str(e)}", e) from e

        logger.info("Deleted section %s and %d descendant(s)", section_id, len(removed) - 1)
        self._emit(TreeChangeKind.DELETED, removed)
        return removed

    def _require_storable(self, section_id: str) -> None:
        # IDs that fail validation were never stored.
        if not self.validator.is_storable_id(section_id):
            raise NotFoundError("Section", section_id)

    def _assemble(self) -> list[SectionView]:
        rows = [SectionRow.from_model(s) for s in self.section_repo.get_all_with_content()]
        return self.assembler.assemble(rows)

    @staticmethod
    def _build_blocks(blocks: Sequence[ContentBlockType]) -> list[ContentBlock]:
        return [
            ContentBlock(order=order, type=block.type, payload=block_payload(block))
            for order, block in enumerate(blocks)
        ]

    def _emit(self, kind: TreeChangeKind, section_ids: Sequence[str]) -> None:
        if self.events is not None:
            self.events.emit(TreeChangeEvent(kind=kind, section_ids=tuple(section_ids)))
