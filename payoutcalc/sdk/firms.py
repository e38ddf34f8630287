"""Vendor firm name normalization.

Claim rows carry whatever the dispatcher typed or the vendor's portal
exported ("SL APPRAISAL SERVICES #4471", "Sedgwk Auto", "ccs"). Forecasting
needs one canonical key per firm, so names are matched against an ordered
list of rules. The first matching rule wins; a name that matches nothing
is returned unchanged and is never guessed into a canonical firm.
"""

from typing import Callable, List, Tuple


UNKNOWN_FIRM = "Unknown"


def _contains(*needles: str) -> Callable[[str], bool]:
    return lambda name: any(n in name for n in needles)


def _equals(*values: str) -> Callable[[str], bool]:
    return lambda name: name in values


def _any_of(*predicates: Callable[[str], bool]) -> Callable[[str], bool]:
    return lambda name: any(p(name) for p in predicates)


# Order matters: broad substrings ("AMA", "SCA") must come after the rules
# for names that could contain them.
FIRM_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_any_of(_contains("G T APPRAISALS"), _equals("LEGACY")), "Legacy"),
    (_any_of(_contains("SL APPRAISAL"), _equals("DOAN")), "Doan"),
    (_any_of(_contains("AUTOCLAIMSDI", "AUTOCLAIMS"), _equals("ACD")), "ACD"),
    (_any_of(_contains("HEAVY EQUIPMENT"), _equals("HEA")), "HEA"),
    (_any_of(_equals("CS", "CCS"), _contains("CLAIMSOLUTION", "CLAIM SOLUTION")), "ClaimSolution"),
    (_contains("AMA"), "AMA"),
    (_contains("A TEAM", "A-TEAM", "ATEAM"), "A-TEAM"),
    (_contains("IANET"), "IANET"),
    (_any_of(_contains("SEDGWK"), _equals("SEDGWICK")), "Sedgwick"),
    (_contains("COMPLETE CLAIMS"), "Complete Claims"),
    (_contains("SCA"), "SCA"),
    (_contains("FRONTLINE"), "Frontline"),
]

CANONICAL_FIRMS = frozenset(key for _, key in FIRM_RULES)


def normalize_firm_name(raw_name: str) -> str:
    """Map a raw vendor name to its canonical firm key.

    Args:
        raw_name: Vendor name as entered on the claim

    Returns:
        Canonical key (e.g. "Legacy"), or raw_name unchanged if no rule matches
    """
    if not raw_name:
        return raw_name

    normalized = raw_name.upper().strip()
    for predicate, key in FIRM_RULES:
        if predicate(normalized):
            return key
    return raw_name


def is_canonical_firm(name: str) -> bool:
    return name in CANONICAL_FIRMS


def display_firm_name(raw_name: str) -> str:
    """Canonical key for display, or 'Unknown' for unmatched names."""
    key = normalize_firm_name(raw_name)
    return key if is_canonical_firm(key) else UNKNOWN_FIRM
