"""Unit tests for BaseModel and AppendOnlyModel.

Uses concrete test models created via Django's SchemaEditor so we can
exercise the abstract classes against a real database.
"""

from __future__ import annotations

import uuid

import pytest
from django.db import connection, models

from modules.core.models import AppendOnlyModel, BaseModel, ImmutableRecordError

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Concrete models for testing (abstract models can't be instantiated)
# ---------------------------------------------------------------------------


class ConcreteBaseModel(BaseModel):
    name = models.CharField(max_length=100)

    class Meta(BaseModel.Meta):
        app_label = "core"
        db_table = "test_concrete_base"


class ConcreteAppendOnlyModel(AppendOnlyModel):
    title = models.CharField(max_length=100)

    class Meta(AppendOnlyModel.Meta):
        app_label = "core"
        db_table = "test_concrete_append_only"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def _test_tables(django_db_setup, django_db_blocker):
    """Create DB tables for concrete test models (idempotent for --reuse-db)."""
    with django_db_blocker.unblock():
        with connection.schema_editor() as editor:
            existing = connection.introspection.table_names()
            if ConcreteBaseModel._meta.db_table not in existing:
                editor.create_model(ConcreteBaseModel)
            if ConcreteAppendOnlyModel._meta.db_table not in existing:
                editor.create_model(ConcreteAppendOnlyModel)


@pytest.fixture(autouse=True)
def _use_test_tables(_test_tables):
    """Ensure test tables exist for every test in this module."""


# ---------------------------------------------------------------------------
# BaseModel tests
# ---------------------------------------------------------------------------


class TestBaseModel:
    """Tests for UUIDv7 PK and timestamp behaviour."""

    def test_id_is_uuid_version_7(self):
        obj = ConcreteBaseModel.objects.create(name="test")
        assert isinstance(obj.id, uuid.UUID)
        assert obj.id.version == 7

    def test_ids_are_time_ordered(self):
        """UUIDv7 encodes timestamp, so sequential creates yield ordered IDs."""
        a = ConcreteBaseModel.objects.create(name="first")
        b = ConcreteBaseModel.objects.create(name="second")
        assert str(a.id) < str(b.id)

    def test_updated_at_changes_on_save(self):
        obj = ConcreteBaseModel.objects.create(name="original")
        original_updated = obj.updated_at
        original_created = obj.created_at
        obj.name = "modified"
        obj.save()
        obj.refresh_from_db()
        assert obj.updated_at > original_updated
        assert obj.created_at == original_created

    def test_save_with_update_fields_includes_updated_at(self):
        """The save() guard must inject updated_at into update_fields."""
        obj = ConcreteBaseModel.objects.create(name="original")
        original_updated = obj.updated_at
        obj.name = "modified"
        obj.save(update_fields=["name"])
        obj.refresh_from_db()
        assert obj.updated_at > original_updated

    def test_id_is_not_editable(self):
        field = ConcreteBaseModel._meta.get_field("id")
        assert field.editable is False


# ---------------------------------------------------------------------------
# AppendOnlyModel tests
# ---------------------------------------------------------------------------


class TestAppendOnlyModel:
    def test_insert_is_allowed(self):
        obj = ConcreteAppendOnlyModel.objects.create(title="fact")
        assert ConcreteAppendOnlyModel.objects.filter(pk=obj.pk).exists()

    def test_update_raises(self):
        obj = ConcreteAppendOnlyModel.objects.create(title="fact")
        obj.title = "rewritten"
        with pytest.raises(ImmutableRecordError):
            obj.save()
        obj.refresh_from_db()
        assert obj.title == "fact"

    def test_delete_raises(self):
        obj = ConcreteAppendOnlyModel.objects.create(title="fact")
        with pytest.raises(ImmutableRecordError):
            obj.delete()
        assert ConcreteAppendOnlyModel.objects.filter(pk=obj.pk).exists()

    def test_bulk_create_is_allowed(self):
        ConcreteAppendOnlyModel.objects.bulk_create(
            [ConcreteAppendOnlyModel(title=f"row-{i}") for i in range(3)]
        )
        assert ConcreteAppendOnlyModel.objects.count() == 3
