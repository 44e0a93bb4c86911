"""End-to-end integration tests for wiki tree workflows."""

import logging

import pytest

pytestmark = pytest.mark.integration

from wikitree.exceptions import InvalidHierarchyError, NotFoundError
from wikitree.services.events import TreeChangeEvent, TreeChangeKind, TreeEvents, log_tree_change
from wikitree.services.section import TreeAssembler
from wikitree.services.section_service import SectionService
from wikitree.storage.repositories import ContentBlockRepository, SectionRepository

SITE = [
    {"section_id": "backend", "title": "Backend"},
    {"section_id": "backend-api", "title": "API", "parent_id": "backend"},
    {
        "section_id": "backend-api-auth",
        "title": "Authentication",
        "parent_id": "backend-api",
        "content": [
            {"type": "paragraph", "text": "Tokens are issued per client."},
            {"type": "code", "value": "curl -H 'Authorization: Bearer ...'", "language": "bash"},
        ],
    },
    {
        "section_id": "backend-db",
        "title": "Database",
        "parent_id": "backend",
        "content": [{"type": "list", "items": ["PostgreSQL in production", "SQLite in tests"]}],
    },
    {"section_id": "frontend", "title": "Frontend", "summary": "The public site"},
    {
        "section_id": "frontend-demo",
        "title": "Demo",
        "parent_id": "frontend",
        "content": [
            {"type": "video", "youtubeId": "abc123"},
            {"type": "image", "src": "https://example.com/shot.png", "alt": "Screenshot"},
        ],
    },
]


def import_site(db, sections, events=None):
    """Bulk import: one create per section, parents before children, one session each."""
    for fields in sections:
        with db.session() as session:
            SectionService(session, events).create_section(**fields)


class TestSiteWorkflow:
    """A documentation site authored through independent units of work."""

    def test_import_and_read_back(self, temp_db):
        """An imported site reads back as the same tree."""
        import_site(temp_db, SITE)

        with temp_db.session() as session:
            tree = SectionService(session).list_sections()

        flat = TreeAssembler.flatten(tree)
        assert [(section_id, parent) for section_id, parent, _ in flat] == [
            ("backend", None),
            ("backend-api", "backend"),
            ("backend-api-auth", "backend-api"),
            ("backend-db", "backend"),
            ("frontend", None),
            ("frontend-demo", "frontend"),
        ]
        db_section = tree[0].children[1].to_dict()
        assert db_section["content"] == [
            {
                "type": "list",
                "items": [{"text": "PostgreSQL in production"}, {"text": "SQLite in tests"}],
            }
        ]
        assert tree[1].to_dict()["summary"] == "The public site"

    def test_restructure_site(self, temp_db):
        """Moves, edits and deletes across sessions keep the tree consistent."""
        import_site(temp_db, SITE)

        with temp_db.session() as session:
            service = SectionService(session)
            service.update_section("backend-db", parent_id="frontend", position=5)
            service.update_section("frontend-demo", content=[{"type": "paragraph", "text": "Soon"}])

        with temp_db.session() as session:
            service = SectionService(session)
            frontend = service.get_section("frontend")
            assert [c.id for c in frontend.children] == ["frontend-demo", "backend-db"]
            assert [b.type for b in frontend.children[0].content] == ["paragraph"]
            with pytest.raises(InvalidHierarchyError):
                service.create_section("frontend-demo-extra", "Extra", parent_id="frontend-demo")

        with temp_db.session() as session:
            removed = SectionService(session).delete_section("backend")
            assert removed == ["backend", "backend-api", "backend-api-auth"]

        with temp_db.session() as session:
            assert SectionRepository(session).count() == 3
            assert ContentBlockRepository(session).count_for_sections(removed) == 0
            with pytest.raises(NotFoundError):
                SectionService(session).get_section("backend-api-auth")

    def test_failed_import_step_leaves_earlier_steps(self, temp_db):
        """Each create is its own transaction."""
        broken = SITE[:2] + [{"section_id": "x", "title": "X", "parent_id": "missing"}]

        with pytest.raises(NotFoundError):
            import_site(temp_db, broken)

        with temp_db.session() as session:
            assert SectionRepository(session).count() == 2


class TestChangeNotifications:
    """Tree change events across a workflow."""

    def test_default_listener_logs_changes(self, temp_db, caplog):
        """The logging listener records every mutation."""
        events = TreeEvents()
        events.subscribe(log_tree_change)

        with caplog.at_level(logging.INFO, logger="wikitree.services.events"):
            import_site(temp_db, SITE[:2], events)
            with temp_db.session() as session:
                SectionService(session, events).delete_section("backend")

        assert "Tree changed (created): backend" in caplog.text
        assert "Tree changed (deleted): backend, backend-api" in caplog.text

    def test_failing_listener_does_not_undo_mutation(self, temp_db):
        """A broken listener is logged; the change stays committed and others still run."""
        events = TreeEvents()
        seen = []

        @events.subscribe
        def broken(event):
            raise RuntimeError("cache unavailable")

        events.subscribe(seen.append)

        import_site(temp_db, SITE[:1], events)

        assert len(seen) == 1
        with temp_db.session() as session:
            assert SectionService(session).get_section("backend").title == "Backend"

    def test_unsubscribe(self):
        """Unsubscribed listeners receive nothing more."""
        events = TreeEvents()
        seen = []
        events.subscribe(seen.append)
        events.unsubscribe(seen.append)
        events.emit(TreeChangeEvent(kind=TreeChangeKind.CREATED, section_ids=("a",)))
        assert seen == []
