"""Tests for the pay cycle table: loading, validation and config resolution."""

import json
from datetime import date

import pytest
import yaml
from pydantic import ValidationError

from payoutcalc.sdk.config import DEFAULT_POLICIES_PATH, get_policies_path, get_upcoming_days
from payoutcalc.sdk.firms import CANONICAL_FIRMS
from payoutcalc.sdk.policies import (
    PolicyConfigError,
    PolicyTable,
    get_default_table,
    load_policy_table,
)
from payoutcalc.sdk.schemas import PayCyclePolicy


def write_table(path, data):
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    return path


class TestPayCyclePolicy:

    def test_weekday_names_accepted(self):
        policy = PayCyclePolicy(firm="Doan", cycle_type="weekly", pay_weekday="Thu",
                                period_length_days=7, lead_days=0)
        assert policy.pay_weekday == 3
        assert policy.pay_weekday_name == "thursday"

    def test_unknown_weekday_rejected(self):
        with pytest.raises(ValidationError, match="Unknown weekday"):
            PayCyclePolicy(firm="Doan", cycle_type="weekly", pay_weekday="someday",
                           period_length_days=7, lead_days=0)

    def test_weekly_requires_weekday_and_lengths(self):
        with pytest.raises(ValidationError) as exc_info:
            PayCyclePolicy(firm="Doan", cycle_type="weekly")
        message = str(exc_info.value)
        assert "pay_weekday" in message
        assert "period_length_days" in message
        assert "lead_days" in message

    def test_biweekly_requires_anchor(self):
        with pytest.raises(ValidationError, match="anchor_date"):
            PayCyclePolicy(firm="Legacy", cycle_type="biweekly", pay_weekday=2,
                           period_length_days=13, lead_days=1)

    def test_anchor_must_fall_on_payday(self):
        # 2024-12-19 is a Thursday
        with pytest.raises(ValidationError, match="expected wednesday"):
            PayCyclePolicy(firm="Legacy", cycle_type="biweekly", pay_weekday="wednesday",
                           anchor_date=date(2024, 12, 19), period_length_days=13, lead_days=1)

    def test_calendar_cycles_need_no_extra_fields(self):
        policy = PayCyclePolicy(firm="ACD", cycle_type="semi_monthly")
        assert policy.weekend_shift == "none"
        assert policy.pay_weekday is None

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            PayCyclePolicy(firm="ACD", cycle_type="semi_monthly", payday=5)

    def test_unknown_cycle_type_rejected(self):
        with pytest.raises(ValidationError):
            PayCyclePolicy(firm="ACD", cycle_type="quarterly")


class TestBundledTable:

    def test_loads_and_validates(self):
        table = get_default_table()
        assert table.version == "2025.1"
        assert len(table) == 11

    def test_every_key_is_canonical(self):
        table = get_default_table()
        assert set(table.firms) <= CANONICAL_FIRMS

    def test_sca_has_fee_but_no_schedule(self):
        table = get_default_table()
        assert "SCA" not in table
        assert table.policy_for("SCA") is None
        assert table.fee_for("SCA").base_fee == 170
        assert table.unscheduled_firms == ["SCA"]

    def test_cycle_types(self):
        table = get_default_table()
        expected = {
            "Sedgwick": "weekly",
            "Doan": "weekly",
            "Legacy": "biweekly",
            "ClaimSolution": "biweekly",
            "ACD": "semi_monthly",
            "HEA": "monthly_15th",
            "IANET": "last_day_of_month",
            "Frontline": "last_day_of_month",
        }
        for firm, cycle_type in expected.items():
            assert table.policy_for(firm).cycle_type == cycle_type

    def test_calendar_cycles_shift_forward(self):
        table = get_default_table()
        for firm in ("ACD", "HEA", "IANET", "Frontline"):
            assert table.policy_for(firm).weekend_shift == "forward_to_monday"


class TestPolicyTableFromDict:

    def test_minimal_table(self):
        table = PolicyTable.from_dict({
            "version": "t1",
            "policies": {"ACD": {"cycle_type": "semi_monthly"}},
        })
        assert table.firms == ["ACD"]
        assert table.version == "t1"
        assert table.fee_for("ACD") is None

    def test_collects_all_errors(self):
        """Every bad entry is reported, not just the first."""
        with pytest.raises(PolicyConfigError) as exc_info:
            PolicyTable.from_dict({
                "policies": {
                    "Doan": {"cycle_type": "weekly"},
                    "Legacy": {"cycle_type": "biweekly", "pay_weekday": 2,
                               "period_length_days": 13, "lead_days": 1},
                    "Acme": {"cycle_type": "semi_monthly"},
                },
                "fees": {"HEA": {"base_fee": -5}},
                "extra": True,
            }, source="test.yaml")

        errors = exc_info.value.errors
        assert any(e.startswith("policies.Doan") for e in errors)
        assert any(e.startswith("policies.Legacy") for e in errors)
        assert any("Acme" in e and "canonical" in e for e in errors)
        assert any(e.startswith("fees.HEA") for e in errors)
        assert any("extra" in e for e in errors)
        assert "test.yaml" in str(exc_info.value)

    def test_firm_field_must_match_key(self):
        with pytest.raises(PolicyConfigError, match="does not match key"):
            PolicyTable.from_dict({
                "policies": {"ACD": {"firm": "HEA", "cycle_type": "semi_monthly"}},
            })

    def test_entry_must_be_mapping(self):
        with pytest.raises(PolicyConfigError, match="must be a mapping"):
            PolicyTable.from_dict({"policies": {"ACD": "semi_monthly"}})

    def test_table_must_be_mapping(self):
        with pytest.raises(PolicyConfigError):
            PolicyTable.from_dict(["ACD"])


class TestLoadPolicyTable:

    def test_explicit_path(self, tmp_path, isolated_config):
        path = write_table(tmp_path / "custom.yaml", {
            "version": "custom",
            "policies": {"IANET": {"cycle_type": "last_day_of_month"}},
        })
        table = load_policy_table(path)
        assert table.version == "custom"
        assert table.source == str(path)
        assert table.policy_for("IANET").weekend_shift == "none"

    def test_missing_file(self, tmp_path, isolated_config):
        with pytest.raises(PolicyConfigError, match="file not found"):
            load_policy_table(tmp_path / "nope.yaml")

    def test_yaml_parse_error(self, tmp_path, isolated_config):
        path = tmp_path / "bad.yaml"
        path.write_text("policies: [unclosed\n")
        with pytest.raises(PolicyConfigError, match="YAML parse error"):
            load_policy_table(path)

    def test_invalid_entry_fails_at_load(self, tmp_path, isolated_config):
        path = write_table(tmp_path / "bad.yaml", {
            "policies": {"Doan": {"cycle_type": "weekly", "pay_weekday": "thursday"}},
        })
        with pytest.raises(PolicyConfigError) as exc_info:
            load_policy_table(path)
        assert "period_length_days" in str(exc_info.value)


class TestPolicyResolution:

    def test_default_is_bundled(self, isolated_config):
        assert get_policies_path() == DEFAULT_POLICIES_PATH

    def test_config_dir_copy_wins_over_bundled(self, isolated_config):
        local = write_table(isolated_config / "pay_cycles.yaml", {
            "policies": {"ACD": {"cycle_type": "semi_monthly"}},
        })
        assert get_policies_path() == local
        assert load_policy_table().firms == ["ACD"]

    def test_settings_path_wins_over_config_dir(self, tmp_path, isolated_config):
        write_table(isolated_config / "pay_cycles.yaml", {"policies": {}})
        custom = write_table(tmp_path / "custom.yaml", {
            "policies": {"HEA": {"cycle_type": "monthly_15th"}},
        })
        (isolated_config / "settings.json").write_text(json.dumps({"policies": str(custom)}))

        assert get_policies_path() == custom
        assert get_policies_path(tmp_path / "override.yaml") == tmp_path / "override.yaml"

    def test_upcoming_days_setting(self, isolated_config):
        assert get_upcoming_days() == 30
        (isolated_config / "settings.json").write_text(json.dumps({"upcoming_days": 14}))
        assert get_upcoming_days() == 14
