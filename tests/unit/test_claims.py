"""Tests for converting claim store rows into Claim records."""

import json
from datetime import date

import pytest
from pydantic import ValidationError

from payoutcalc.sdk.claims import (
    ClaimsFileError,
    claim_from_record,
    claims_from_records,
    load_claims,
)
from payoutcalc.sdk.policies import get_default_table
from payoutcalc.sdk.schemas import Claim, parse_date


@pytest.fixture
def table():
    return get_default_table()


class TestParseDate:

    @pytest.mark.parametrize("value,expected", [
        ("2025-03-04", date(2025, 3, 4)),
        ("2025-03-04T23:30:00Z", date(2025, 3, 4)),
        ("2025-03-04 08:00:00-05:00", date(2025, 3, 4)),
        ("03/04/2025", date(2025, 3, 4)),
        (date(2025, 3, 4), date(2025, 3, 4)),
    ])
    def test_formats(self, value, expected):
        assert parse_date(value) == expected

    def test_empty(self):
        assert parse_date(None) is None
        assert parse_date("") is None

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid date"):
            parse_date("next tuesday")


class TestClaimFromRecord:

    def test_completed_uses_completion_date_and_file_total(self, table):
        claim = claim_from_record({
            "id": "c1",
            "firm_name": "SL Appraisal",
            "status": "COMPLETED",
            "completion_date": "2025-03-04T16:00:00",
            "appointment_start": "2025-02-20T09:00:00",
            "file_total": "312.50",
            "pay_amount": 250,
        }, table)
        assert claim.work_date == date(2025, 3, 4)
        assert claim.amount_candidates == [312.5, 250.0]
        assert claim.is_completed

    def test_scheduled_uses_appointment_and_standard_fee(self, table):
        claim = claim_from_record({
            "id": "s1",
            "firm_name": "G T Appraisals",
            "status": "SCHEDULED",
            "appointment_start": "2025-01-16T10:00:00",
        }, table)
        assert claim.work_date == date(2025, 1, 16)
        # Legacy standard fee
        assert claim.amount_candidates == [None, 190.0]
        assert not claim.is_completed

    def test_scheduled_without_table_has_no_fee_fallback(self):
        claim = claim_from_record({
            "id": "s1",
            "firm_name": "Doan",
            "status": "SCHEDULED",
            "appointment_start": "2025-03-04",
            "pay_amount": 200,
        })
        assert claim.amount_candidates == [200.0]

    def test_completed_without_date_falls_back_to_appointment(self, table):
        claim = claim_from_record({
            "id": "c2",
            "firm_name": "Doan",
            "status": "completed",
            "appointment_start": "2025-03-04",
        }, table)
        assert claim.work_date == date(2025, 3, 4)

    def test_no_dates(self, table):
        claim = claim_from_record({"id": "n1", "firm": "Doan", "status": "SCHEDULED"}, table)
        assert claim.work_date is None
        assert claim.firm_raw == "Doan"

    def test_unparseable_amount_is_missing(self, table):
        claim = claim_from_record({
            "id": "c3",
            "firm_name": "Doan",
            "status": "COMPLETED",
            "completion_date": "2025-03-04",
            "file_total": "TBD",
        }, table)
        assert claim.amount_candidates == [None, None]

    def test_claim_is_frozen(self, table):
        claim = claim_from_record({"id": "f1", "firm_name": "Doan"}, table)
        with pytest.raises(ValidationError):
            claim.status = "COMPLETED"


class TestClaimsFromRecords:

    def test_collects_all_bad_rows(self, table):
        with pytest.raises(ClaimsFileError) as exc_info:
            claims_from_records([
                {"id": "ok", "firm_name": "Doan"},
                "not a row",
                {"firm_name": "Doan"},
                {"id": "bad", "firm_name": "Doan", "completion_date": "soon", "status": "COMPLETED"},
            ], table)
        errors = exc_info.value.errors
        assert len(errors) == 3
        assert errors[0].startswith("row 1")
        assert "missing id" in errors[1]
        assert "bad" in errors[2]

    def test_zero_id_is_a_valid_id(self, table):
        claims = claims_from_records([{"id": 0, "firm_name": "Doan"}], table)
        assert [c.id for c in claims] == ["0"]

    def test_empty_id_is_missing(self, table):
        with pytest.raises(ClaimsFileError, match="missing id"):
            claims_from_records([{"id": "", "firm_name": "Doan"}], table)


class TestLoadClaims:

    def test_list_file(self, tmp_path, table):
        path = tmp_path / "claims.json"
        path.write_text(json.dumps([
            {"id": "c1", "firm_name": "Doan", "status": "COMPLETED",
             "completion_date": "2025-03-04", "file_total": 250},
        ]))
        claims = load_claims(path, table)
        assert claims == [Claim(id="c1", firm_raw="Doan", work_date=date(2025, 3, 4),
                                amount_candidates=[250.0, None], status="COMPLETED")]

    def test_wrapped_file(self, tmp_path, table):
        path = tmp_path / "claims.json"
        path.write_text(json.dumps({"claims": [{"id": "c1", "firm_name": "Doan"}]}))
        assert [c.id for c in load_claims(path, table)] == ["c1"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_claims(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "claims.json"
        path.write_text("{not json")
        with pytest.raises(ClaimsFileError):
            load_claims(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "claims.json"
        path.write_text(json.dumps({"rows": []}))
        with pytest.raises(ClaimsFileError, match="expected a list"):
            load_claims(path)
