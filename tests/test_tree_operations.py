"""Tests for tree assembly, descendant resolution and position allocation."""

import logging
import random
from datetime import date, datetime, timezone

import pytest

pytestmark = pytest.mark.unit

from wikitree.schemas.content import parse_content_block
from wikitree.services.section import (
    SectionRow,
    TreeAssembler,
    build_children_map,
    collect_descendants,
    next_position,
)
from wikitree.services.section.navigation import (
    collect_leaf_paths,
    find_path_to_section,
    find_section_by_id,
    find_section_by_path,
    first_leaf_path,
)
from wikitree.services.section.timeline import build_timeline

STAMP = datetime(2024, 3, 9, 17, 45, tzinfo=timezone.utc)


def row(section_id, parent_id=None, position=0, content=None, **extra):
    extra.setdefault("added_at", STAMP)
    extra.setdefault("updated_at", STAMP)
    return SectionRow(
        id=section_id,
        title=section_id.title(),
        parent_id=parent_id,
        position=position,
        content=content or [],
        **extra,
    )


@pytest.fixture
def site_rows():
    """Rows of a two-level site, deliberately out of order."""
    return [
        row("api-auth", "api", 1),
        row("guide", None, 0),
        row("api", None, 1),
        row("api-intro", "api", 0, content=[parse_content_block({"type": "paragraph", "text": "Hi"})]),
        row("guide-setup", "guide", 0),
    ]


class TestTreeAssembler:
    """Tests for building the nested tree."""

    def test_assemble_orders_siblings(self, site_rows):
        """Roots and children come out in position order."""
        tree = TreeAssembler().assemble(site_rows)

        assert [s.id for s in tree] == ["guide", "api"]
        assert [c.id for c in tree[1].children] == ["api-intro", "api-auth"]
        assert [c.id for c in tree[0].children] == ["guide-setup"]

    def test_assemble_strips_position_and_empty_fields(self, site_rows):
        """Position never appears; content and children only appear when non-empty."""
        tree = TreeAssembler().assemble(site_rows)
        guide = tree[0].to_dict()
        leaf = tree[1].children[0].to_dict()

        assert "position" not in guide
        assert "content" not in guide
        assert leaf["content"] == [{"type": "paragraph", "text": "Hi"}]
        assert "children" not in leaf
        assert leaf["addedAt"] == "2024-03-09"
        assert leaf["updatedAt"] == "2024-03-09"

    def test_assemble_is_independent_of_row_order(self, site_rows):
        """Any permutation of the rows yields the same tree."""
        expected = [s.to_dict() for s in TreeAssembler().assemble(site_rows)]
        shuffler = random.Random(7)
        for _ in range(10):
            rows = list(site_rows)
            shuffler.shuffle(rows)
            assert [s.to_dict() for s in TreeAssembler().assemble(rows)] == expected

    def test_position_ties_break_by_id(self):
        """Equal positions fall back to ID order."""
        tree = TreeAssembler().assemble([row("b", None, 0), row("a", None, 0)])
        assert [s.id for s in tree] == ["a", "b"]

    def test_orphans_are_dropped_and_logged(self, site_rows, caplog):
        """A row whose parent is missing is left out with a warning."""
        rows = site_rows + [row("lost", "deleted-parent", 0), row("lost-child", "lost", 0)]

        with caplog.at_level(logging.WARNING, logger="wikitree.services.section.tree_operations"):
            tree = TreeAssembler().assemble(rows)

        ids = [entry[0] for entry in TreeAssembler.flatten(tree)]
        assert "lost" not in ids
        assert "lost-child" not in ids
        assert len(ids) == len(site_rows)
        assert "lost" in caplog.text

    def test_cyclic_rows_do_not_hang(self):
        """Rows that only reach each other are never emitted."""
        rows = [row("root"), row("x", "y"), row("y", "x")]
        tree = TreeAssembler().assemble(rows)
        assert [s.id for s in tree] == ["root"]

    def test_empty_input(self):
        """No rows, no roots."""
        assert TreeAssembler().assemble([]) == []

    def test_deep_tree(self):
        """Depth is bounded by data, not by the interpreter stack."""
        depth = 3000
        rows = [row("n0")] + [row(f"n{i}", f"n{i - 1}") for i in range(1, depth)]

        tree = TreeAssembler().assemble(rows)

        flat = TreeAssembler.flatten(tree)
        assert len(flat) == depth
        assert flat[-1] == (f"n{depth - 1}", f"n{depth - 2}", 0)

    def test_flatten_round_trip(self, site_rows):
        """Flattening recovers each row's parent and relative order."""
        flat = TreeAssembler.flatten(TreeAssembler().assemble(site_rows))

        assert flat == [
            ("guide", None, 0),
            ("guide-setup", "guide", 0),
            ("api", None, 1),
            ("api-intro", "api", 0),
            ("api-auth", "api", 1),
        ]
        parents = {r.id: r.parent_id for r in site_rows}
        assert {section_id: parent for section_id, parent, _ in flat} == parents


class TestDescendants:
    """Tests for subtree resolution over (id, parent_id) pairs."""

    def test_breadth_first(self):
        """Children come before grandchildren; the start is excluded."""
        pairs = [("a", None), ("b", "a"), ("c", "a"), ("d", "b"), ("e", "c"), ("z", None)]
        assert collect_descendants("a", build_children_map(pairs)) == ["b", "c", "d", "e"]

    def test_leaf_has_no_descendants(self):
        """A leaf resolves to nothing."""
        assert collect_descendants("b", build_children_map([("a", None), ("b", "a")])) == []

    def test_cycle_terminates(self):
        """Corrupt cyclic data still yields a finite result."""
        pairs = [("a", "c"), ("b", "a"), ("c", "b")]
        assert sorted(collect_descendants("a", build_children_map(pairs))) == ["b", "c"]


class TestPositions:
    """Tests for sibling position allocation."""

    @pytest.mark.parametrize(
        "positions, expected",
        [([], 0), ([0], 1), ([0, 1, 2], 3), ([4, 1], 5), ([0, 7, 3], 8)],
    )
    def test_next_position(self, positions, expected):
        """Next position is one past the maximum, or 0."""
        assert next_position(positions) == expected

    def test_allocator_uses_siblings_only(self, section_service):
        """Positions under one parent ignore other parents' children."""
        section_service.create_section("a", "A")
        section_service.create_section("b", "B")
        section_service.create_section("a1", "A1", parent_id="a", position=4)

        assert section_service.allocator.allocate("a") == 5
        assert section_service.allocator.allocate("b") == 0
        assert section_service.allocator.allocate(None) == 2
        assert section_service.allocator.is_taken("a", 4)
        assert not section_service.allocator.is_taken("a", 4, exclude_id="a1")


class TestNavigation:
    """Tests for lookups over an assembled tree."""

    def test_find_by_id(self, site_rows):
        """Any node is found, however deep."""
        tree = TreeAssembler().assemble(site_rows)
        assert find_section_by_id("api-auth", tree).title == "Api-Auth"
        assert find_section_by_id("nope", tree) is None

    def test_find_by_path(self, site_rows):
        """A path must follow real parent links."""
        tree = TreeAssembler().assemble(site_rows)
        assert find_section_by_path(["api", "api-auth"], tree).id == "api-auth"
        assert find_section_by_path(["guide", "api-auth"], tree) is None
        assert find_section_by_path([], tree) is None

    def test_first_leaf_path(self, site_rows):
        """The first leaf follows the first child at every level."""
        tree = TreeAssembler().assemble(site_rows)
        assert first_leaf_path(tree[1], ["api"]) == ["api", "api-intro"]
        assert first_leaf_path(tree[1].children[1], ["api", "api-auth"]) == ["api", "api-auth"]

    def test_collect_leaf_paths(self, site_rows):
        """Leaves come out in reading order with their full paths."""
        tree = TreeAssembler().assemble(site_rows)
        leaves = collect_leaf_paths(tree)
        assert [path for path, _ in leaves] == [
            ["guide", "guide-setup"],
            ["api", "api-intro"],
            ["api", "api-auth"],
        ]
        assert leaves[1][1].content[0].text == "Hi"

    def test_collect_leaf_paths_childless_root(self):
        """A root without children is a leaf on its own."""
        tree = TreeAssembler().assemble([row("about"), row("docs", None, 1), row("docs-a", "docs")])
        assert [path for path, _ in collect_leaf_paths(tree)] == [["about"], ["docs", "docs-a"]]
        assert collect_leaf_paths([]) == []

    def test_find_path_to_section(self, site_rows):
        """Any node resolves to the path that addresses it."""
        tree = TreeAssembler().assemble(site_rows)
        assert find_path_to_section("api-auth", tree) == ["api", "api-auth"]
        assert find_path_to_section("guide", tree) == ["guide"]
        assert find_path_to_section("nope", tree) is None

    def test_find_path_to_section_deep(self):
        """Deep trees resolve without recursion."""
        rows = [row("n0")] + [row(f"n{i}", f"n{i - 1}") for i in range(1, 1500)]
        tree = TreeAssembler().assemble(rows)
        path = find_path_to_section("n1499", tree)
        assert len(path) == 1500
        assert path[0] == "n0"
        assert path[-1] == "n1499"


def stamp(day):
    return datetime(2024, 3, day, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def dated_tree():
    """guide/setup changed on the 5th, api/intro added on the 7th, api/auth on the 3rd."""
    rows = [
        row("guide", added_at=stamp(1), updated_at=stamp(1)),
        row("guide-setup", "guide", added_at=stamp(1), updated_at=stamp(5)),
        row("api", None, 1, added_at=stamp(2), updated_at=stamp(2)),
        row("api-intro", "api", 0, added_at=stamp(7), updated_at=None),
        row("api-auth", "api", 1, added_at=stamp(3), updated_at=stamp(3)),
    ]
    return TreeAssembler().assemble(rows)


class TestTimeline:
    """Tests for the leaf timeline."""

    def test_most_recent_first(self, dated_tree):
        """Leaves sort by last change, falling back to the creation day."""
        entries = build_timeline(dated_tree)
        assert [entry.id for entry in entries] == ["api-intro", "guide-setup", "api-auth"]
        assert entries[0].slug == ["api", "api-intro"]
        assert entries[0].root_id == "api"
        assert entries[0].root_title == "Api"

    def test_entry_wire_form(self, dated_tree):
        """Entries serialize with camelCase keys and no empty fields."""
        entry = build_timeline(dated_tree)[1].to_dict()
        assert entry == {
            "slug": ["guide", "guide-setup"],
            "id": "guide-setup",
            "title": "Guide-Setup",
            "addedAt": "2024-03-01",
            "updatedAt": "2024-03-05",
            "rootId": "guide",
            "rootTitle": "Guide",
        }

    def test_filter_by_root(self, dated_tree):
        """Only leaves under the requested root are kept."""
        entries = build_timeline(dated_tree, root_id="api")
        assert [entry.id for entry in entries] == ["api-intro", "api-auth"]
        assert build_timeline(dated_tree, root_id="missing") == []

    def test_filter_by_dates(self, dated_tree):
        """Date bounds are inclusive."""
        entries = build_timeline(dated_tree, since=date(2024, 3, 3), until=date(2024, 3, 5))
        assert [entry.id for entry in entries] == ["guide-setup", "api-auth"]

    def test_ties_keep_reading_order(self):
        """Leaves changed on the same day stay in tree order."""
        tree = TreeAssembler().assemble([row("b", None, 0), row("a", None, 1), row("c", None, 2)])
        assert [entry.id for entry in build_timeline(tree)] == ["b", "a", "c"]
