"""Unit tests for status registry DTOs."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.statuses.dtos import CreateStatusDTO, UpdateStatusDTO, normalize_slug

pytestmark = pytest.mark.unit


class TestNormalizeSlug:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("awaiting proof", "AWAITING_PROOF"),
            ("  awaiting-proof ", "AWAITING_PROOF"),
            ("Quality  Check", "QUALITY_CHECK"),
            ("PAID", "PAID"),
        ],
    )
    def test_normalises(self, raw, expected):
        assert normalize_slug(raw) == expected


class TestCreateStatusDTO:
    def test_slug_is_normalised(self):
        dto = CreateStatusDTO(slug="awaiting proof", name="Awaiting Proof")
        assert dto.slug == "AWAITING_PROOF"

    def test_defaults(self):
        dto = CreateStatusDTO(slug="QA", name="QA")
        assert dto.is_active is True
        assert dto.include_in_reports is True
        assert dto.send_email_on_enter is False
        assert dto.email_template_id is None

    @pytest.mark.parametrize("slug", ["1ST", "X", "", "A" * 51, "BAD$SLUG"])
    def test_invalid_slug_rejected(self, slug):
        with pytest.raises(ValidationError):
            CreateStatusDTO(slug=slug, name="Anything")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            CreateStatusDTO(slug="QA_CHECK", name="   ")

    def test_is_core_cannot_be_supplied(self):
        with pytest.raises(ValidationError):
            CreateStatusDTO(slug="QA_CHECK", name="QA", is_core=True)

    def test_is_frozen(self):
        dto = CreateStatusDTO(slug="QA_CHECK", name="QA")
        with pytest.raises(ValidationError):
            dto.name = "Other"


class TestUpdateStatusDTO:
    def test_touched_fields_only_include_payload_keys(self):
        dto = UpdateStatusDTO(description="New text")
        assert dto.touched_fields == {"description"}
        assert dto.changes() == {"description": "New text"}

    def test_explicit_null_counts_as_touched(self):
        dto = UpdateStatusDTO(email_template_id=None)
        assert dto.touched_fields == {"email_template_id"}
        assert dto.changes() == {"email_template_id": None}

    def test_slug_is_accepted_so_it_can_be_rejected_later(self):
        dto = UpdateStatusDTO(slug="NEW_SLUG")
        assert "slug" in dto.touched_fields

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            UpdateStatusDTO(colour="red")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            UpdateStatusDTO(name="")
