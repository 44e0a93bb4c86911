"""Section tree operations."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from wikitree.models.section import Section
from wikitree.schemas.content import ContentBlockType, block_from_row
from wikitree.schemas.section import SectionView

logger = logging.getLogger(__name__)


@dataclass
class SectionRow:
    """Flat, persisted view of one section with its content already resolved."""

    id: str
    title: str
    parent_id: Optional[str]
    position: int
    summary: Optional[str] = None
    added_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    content: list[ContentBlockType] = field(default_factory=list)

    @classmethod
    def from_model(cls, section: Section) -> "SectionRow":
        """Build a row from a Section whose content blocks are loaded (ordered by ``order``)."""
        return cls(
            id=section.id,
            title=section.title,
            parent_id=section.parent_id,
            position=section.position,
            summary=section.summary,
            added_at=section.added_at,
            updated_at=section.updated_at,
            content=[block_from_row(block.type, block.payload) for block in section.content_blocks],
        )


@dataclass
class _Node:
    row: SectionRow
    children: list["_Node"] = field(default_factory=list)


def _sort_key(node: _Node) -> tuple[int, str]:
    return node.row.position, node.row.id


def _format_date(value: Optional[datetime]) -> Optional[str]:
    return value.date().isoformat() if value else None


class TreeAssembler:
    """Builds the nested section tree from flat rows."""

    def assemble(self, rows: Sequence[SectionRow]) -> list[SectionView]:
        """
        Reconstruct the nested tree.

        Every sibling list is sorted by ``position`` (ties broken by ID), the
        position is stripped from the output, ``content`` is left out when
        empty and ``children`` is left out for leaves. The walk uses explicit
        stacks, so very deep trees do not hit the recursion limit.

        Rows whose parent is not in ``rows`` are dropped (and logged); they
        never make the assembly fail.

        Args:
            rows: All section rows, in any order

        Returns:
            Root-level sections with their subtrees
        """
        nodes = {row.id: _Node(row) for row in rows}
        roots: list[_Node] = []
        orphans: list[str] = []

        for row in rows:
            node = nodes[row.id]
            if row.parent_id is None:
                roots.append(node)
                continue
            parent = nodes.get(row.parent_id)
            if parent is None:
                orphans.append(row.id)
            else:
                parent.children.append(node)

        if orphans:
            logger.warning(
                "Dropping %d section(s) whose parent does not exist: %s",
                len(orphans),
                ", ".join(sorted(orphans)),
            )

        # Pre-order walk from the roots, sorting each sibling list on the way.
        roots.sort(key=_sort_key)
        preorder: list[_Node] = []
        seen: set[str] = set()
        stack = list(reversed(roots))
        while stack:
            node = stack.pop()
            if node.row.id in seen:
                continue
            seen.add(node.row.id)
            preorder.append(node)
            node.children.sort(key=_sort_key)
            stack.extend(reversed(node.children))

        # Children always follow their parent in pre-order, so building
        # views in reverse order has every child view ready for its parent.
        views: dict[str, SectionView] = {}
        for node in reversed(preorder):
            row = node.row
            children = [views[child.row.id] for child in node.children if child.row.id in views]
            views[row.id] = SectionView(
                id=row.id,
                title=row.title,
                summary=row.summary,
                added_at=_format_date(row.added_at),
                updated_at=_format_date(row.updated_at),
                content=list(row.content) or None,
                children=children or None,
            )

        return [views[node.row.id] for node in roots]

    @staticmethod
    def flatten(tree: Sequence[SectionView]) -> list[tuple[str, Optional[str], int]]:
        """
        Flatten an assembled tree depth-first.

        Returns:
            ``(id, parent_id, index among siblings)`` for every node in pre-order
        """
        flat: list[tuple[str, Optional[str], int]] = []
        stack: list[tuple[SectionView, Optional[str], int]] = [
            (view, None, index) for index, view in reversed(list(enumerate(tree)))
        ]
        while stack:
            view, parent_id, index = stack.pop()
            flat.append((view.id, parent_id, index))
            children = view.children or []
            stack.extend(
                (child, view.id, child_index)
                for child_index, child in reversed(list(enumerate(children)))
            )
        return flat
