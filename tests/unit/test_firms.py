"""Tests for vendor firm name normalization."""

import pytest

from payoutcalc.sdk.firms import (
    CANONICAL_FIRMS,
    FIRM_RULES,
    display_firm_name,
    is_canonical_firm,
    normalize_firm_name,
)


class TestNormalizeFirmName:
    """Raw vendor text maps to one canonical key."""

    @pytest.mark.parametrize("raw,expected", [
        ("G T Appraisals LLC", "Legacy"),
        ("legacy", "Legacy"),
        ("SL APPRAISAL SERVICES #4471", "Doan"),
        ("Doan", "Doan"),
        ("AutoClaimsDI", "ACD"),
        ("acd", "ACD"),
        ("Heavy Equipment Appraisers", "HEA"),
        ("HEA", "HEA"),
        ("CCS", "ClaimSolution"),
        ("cs", "ClaimSolution"),
        ("Claim Solution Inc", "ClaimSolution"),
        ("AMA Appraisals", "AMA"),
        ("A Team Adjusters", "A-TEAM"),
        ("ATEAM", "A-TEAM"),
        ("IANET 2291", "IANET"),
        ("Sedgwk Auto", "Sedgwick"),
        ("  sedgwick  ", "Sedgwick"),
        ("Complete Claims", "Complete Claims"),
        ("SCA", "SCA"),
        ("Frontline Auto", "Frontline"),
    ])
    def test_known_variants(self, raw, expected):
        assert normalize_firm_name(raw) == expected

    def test_unmatched_name_returned_unchanged(self):
        """No rule matches: return the original text, never a guess."""
        assert normalize_firm_name("Bob's Body Shop") == "Bob's Body Shop"
        assert not is_canonical_firm(normalize_firm_name("Bob's Body Shop"))

    def test_exact_match_rules_do_not_match_substrings(self):
        """'SEDGWICK' is an exact rule; 'Sedgwick Claims' does not match it."""
        assert normalize_firm_name("Sedgwick Claims") == "Sedgwick Claims"

    def test_empty_name(self):
        assert normalize_firm_name("") == ""

    def test_first_match_wins(self):
        """Earlier rules take priority over broader later ones.

        'HEAVY EQUIPMENT SCA' contains both the HEA and SCA needles; HEA is
        listed first.
        """
        assert normalize_firm_name("Heavy Equipment SCA") == "HEA"

    def test_pure_function(self):
        raw = "SL Appraisal"
        assert normalize_firm_name(raw) == normalize_firm_name(raw)
        assert raw == "SL Appraisal"


class TestCanonicalFirms:

    def test_rules_cover_every_canonical_firm(self):
        assert CANONICAL_FIRMS == {key for _, key in FIRM_RULES}
        assert len(CANONICAL_FIRMS) == 12

    @pytest.mark.parametrize("key", sorted(CANONICAL_FIRMS))
    def test_canonical_key_normalizes_to_itself(self, key):
        assert normalize_firm_name(key) == key

    def test_display_name_marks_unknown(self):
        assert display_firm_name("sl appraisal") == "Doan"
        assert display_firm_name("Mystery Firm") == "Unknown"
