"""Tests for DiffEngine (create/update/delete diffs with exclude and redact)."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from bookshelf.application.services.audit_policy import AuditPolicyRegistry
from bookshelf.application.services.diff_engine import REDACTED, DiffEngine


@pytest.fixture
def engine() -> DiffEngine:
    registry = AuditPolicyRegistry.from_config(
        {
            "Book": {"exclude": ["updated_at"]},
            "User": {"exclude": ["updated_at"], "redact": ["hashed_password"]},
            "Session": {"track": False},
        }
    )
    return DiffEngine(registry)


def _book(**overrides):
    data = {
        "id": "b1",
        "title": "Dune",
        "authors": "Frank Herbert",
        "published_by": "Chilton",
        "is_deleted": False,
        "created_at": datetime(2024, 1, 1, tzinfo=UTC),
        "updated_at": datetime(2024, 1, 1, tzinfo=UTC),
    }
    data.update(overrides)
    return data


class TestCreateDiff:
    def test_lists_every_non_excluded_field(self, engine: DiffEngine) -> None:
        """A create reports all fields present in after, minus excluded ones."""
        result = engine.compute_create_diff("Book", _book())
        assert result is not None
        assert result.before == {}
        assert "updated_at" not in result.after
        assert set(result.fields_changed) == {
            "id",
            "title",
            "authors",
            "published_by",
            "is_deleted",
            "created_at",
        }

    def test_untracked_entity_returns_none(self, engine: DiffEngine) -> None:
        assert engine.compute_create_diff("Session", {"id": "s1"}) is None
        assert engine.compute_create_diff("Publisher", {"id": "p1"}) is None


class TestUpdateDiff:
    def test_only_changed_fields_reported(self, engine: DiffEngine) -> None:
        """Changing title reports just title; excluded updated_at is ignored."""
        before = _book()
        after = _book(
            title="Dune Messiah",
            updated_at=datetime(2024, 2, 1, tzinfo=UTC),
        )
        result = engine.compute_update_diff("Book", before, after)
        assert result is not None
        assert result.fields_changed == ("title",)
        assert result.before["title"] == "Dune"
        assert result.after["title"] == "Dune Messiah"
        assert "updated_at" not in result.before
        assert "updated_at" not in result.after

    def test_no_change_gives_empty_fields_changed(self, engine: DiffEngine) -> None:
        result = engine.compute_update_diff("Book", _book(), _book())
        assert result is not None
        assert result.fields_changed == ()

    def test_only_excluded_change_gives_empty_fields_changed(self, engine: DiffEngine) -> None:
        """An update touching only excluded fields has nothing to report."""
        after = _book(updated_at=datetime(2025, 1, 1, tzinfo=UTC))
        result = engine.compute_update_diff("Book", _book(), after)
        assert result is not None
        assert result.fields_changed == ()

    def test_equal_instants_in_different_zones_are_unchanged(self, engine: DiffEngine) -> None:
        """Datetimes compare by UTC instant, not by object identity or offset."""
        utc_value = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        offset_value = utc_value.astimezone(timezone(timedelta(hours=3)))
        result = engine.compute_update_diff(
            "Book", _book(created_at=utc_value), _book(created_at=offset_value)
        )
        assert result is not None
        assert "created_at" not in result.fields_changed

    def test_nested_values_compare_structurally(self, engine: DiffEngine) -> None:
        before = _book(tags={"a": [1, 2]})
        after = _book(tags={"a": [1, 2]})
        result = engine.compute_update_diff("Book", before, after)
        assert result is not None
        assert result.fields_changed == ()

    def test_added_and_removed_keys_are_changes(self, engine: DiffEngine) -> None:
        before = _book(subtitle="Book One")
        after = _book(isbn="978-0441013593")
        del after["title"]
        result = engine.compute_update_diff("Book", before, after)
        assert result is not None
        assert set(result.fields_changed) == {"subtitle", "isbn", "title"}

    def test_redacted_field_change_is_reported_but_hidden(self, engine: DiffEngine) -> None:
        """Redacted values never appear; a change to them is still listed."""
        before = {"id": "u1", "email": "a@bookpub.com", "hashed_password": "old-hash"}
        after = {"id": "u1", "email": "a@bookpub.com", "hashed_password": "new-hash"}
        result = engine.compute_update_diff("User", before, after)
        assert result is not None
        assert result.fields_changed == ("hashed_password",)
        assert result.before["hashed_password"] == REDACTED
        assert result.after["hashed_password"] == REDACTED

    def test_unchanged_redacted_field_is_not_reported(self, engine: DiffEngine) -> None:
        snapshot = {"id": "u1", "hashed_password": "same-hash"}
        result = engine.compute_update_diff("User", snapshot, dict(snapshot))
        assert result is not None
        assert result.fields_changed == ()
        assert result.after["hashed_password"] == REDACTED


class TestDeleteDiff:
    def test_before_only(self, engine: DiffEngine) -> None:
        """A delete keeps the filtered before state and an empty after."""
        result = engine.compute_delete_diff("Book", _book())
        assert result is not None
        assert result.after == {}
        assert result.before["title"] == "Dune"
        assert "title" in result.fields_changed
        assert "updated_at" not in result.fields_changed


def test_compute_diff_requires_a_snapshot(engine: DiffEngine) -> None:
    with pytest.raises(ValueError):
        engine.compute_diff("Book", None, None)


def test_snapshots_are_not_mutated(engine: DiffEngine) -> None:
    """The engine works on copies; caller snapshots keep excluded and secret fields."""
    before = {"id": "u1", "hashed_password": "h1", "updated_at": "x"}
    after = {"id": "u1", "hashed_password": "h2", "updated_at": "y"}
    engine.compute_update_diff("User", before, after)
    assert before["hashed_password"] == "h1"
    assert after["updated_at"] == "y"
