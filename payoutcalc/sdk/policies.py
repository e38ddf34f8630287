"""Pay cycle policy table.

One PayCyclePolicy per canonical firm, loaded from YAML. The table is
validated as a whole when it is loaded: a policy missing a field its
cycle type needs is a configuration defect and fails here, never later
while claims are being resolved.

A firm with no policy row is "not configured". Callers must treat that
as "skip and warn", not as a zero payout.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .config import DEFAULT_POLICIES_PATH, get_policies_path
from .firms import is_canonical_firm
from .schemas import FirmFee, PayCyclePolicy

logger = logging.getLogger(__name__)

TOP_LEVEL_KEYS = ("version", "policies", "fees")


class PolicyConfigError(Exception):
    """Raised when a pay cycle table cannot be loaded."""

    def __init__(self, errors: List[str], source: Optional[str] = None):
        self.errors = errors
        self.source = source
        where = f" ({source})" if source else ""
        super().__init__(f"Invalid pay cycle table{where}: {'; '.join(errors)}")


def _format_validation_error(prefix: str, exc: ValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        path = f"{prefix}.{loc}" if loc else prefix
        messages.append(f"{path}: {err.get('msg')}")
    return messages


class PolicyTable:
    """Static, versioned lookup of pay cycle policies and firm fees."""

    def __init__(
        self,
        policies: Dict[str, PayCyclePolicy],
        fees: Optional[Dict[str, FirmFee]] = None,
        version: str = "",
        source: Optional[str] = None,
    ):
        self._policies = dict(policies)
        self._fees = dict(fees or {})
        self.version = version
        self.source = source

    def policy_for(self, firm: str) -> Optional[PayCyclePolicy]:
        """Policy for a canonical firm, or None if the firm is not configured."""
        return self._policies.get(firm)

    def fee_for(self, firm: str) -> Optional[FirmFee]:
        return self._fees.get(firm)

    @property
    def firms(self) -> List[str]:
        return sorted(self._policies)

    @property
    def policies(self) -> List[PayCyclePolicy]:
        return [self._policies[f] for f in self.firms]

    @property
    def unscheduled_firms(self) -> List[str]:
        """Firms with a fee row but deliberately no pay cycle."""
        return sorted(set(self._fees) - set(self._policies))

    def __contains__(self, firm: str) -> bool:
        return firm in self._policies

    def __len__(self) -> int:
        return len(self._policies)

    @classmethod
    def from_dict(cls, data: Any, source: Optional[str] = None) -> "PolicyTable":
        """Build a table from parsed YAML, collecting every problem found.

        Raises:
            PolicyConfigError: If any entry is invalid
        """
        if not isinstance(data, dict):
            raise PolicyConfigError(["table must be a mapping"], source)

        errors = []

        for key in data:
            if key not in TOP_LEVEL_KEYS:
                errors.append(f"unknown top-level key '{key}'")

        raw_policies = data.get("policies") or {}
        raw_fees = data.get("fees") or {}
        if not isinstance(raw_policies, dict):
            errors.append("'policies' must be a mapping of firm -> policy")
            raw_policies = {}
        if not isinstance(raw_fees, dict):
            errors.append("'fees' must be a mapping of firm -> fee")
            raw_fees = {}

        policies: Dict[str, PayCyclePolicy] = {}
        for firm, entry in raw_policies.items():
            firm = str(firm)
            if not is_canonical_firm(firm):
                errors.append(f"policies.{firm}: not a canonical firm key")
                continue
            if not isinstance(entry, dict):
                errors.append(f"policies.{firm}: must be a mapping")
                continue
            if entry.get("firm", firm) != firm:
                errors.append(f"policies.{firm}: firm field '{entry['firm']}' does not match key")
                continue
            try:
                policies[firm] = PayCyclePolicy(**{**entry, "firm": firm})
            except ValidationError as e:
                errors.extend(_format_validation_error(f"policies.{firm}", e))

        fees: Dict[str, FirmFee] = {}
        for firm, entry in raw_fees.items():
            firm = str(firm)
            if not is_canonical_firm(firm):
                errors.append(f"fees.{firm}: not a canonical firm key")
                continue
            if not isinstance(entry, dict):
                errors.append(f"fees.{firm}: must be a mapping")
                continue
            try:
                fees[firm] = FirmFee(**entry)
            except ValidationError as e:
                errors.extend(_format_validation_error(f"fees.{firm}", e))

        if errors:
            raise PolicyConfigError(errors, source)

        return cls(policies, fees, version=str(data.get("version", "")), source=source)


def load_policy_table(path: Optional[Path] = None) -> PolicyTable:
    """Load and validate a pay cycle table.

    Args:
        path: Explicit table file. Defaults to the configured table
              (see config.get_policies_path).

    Returns:
        PolicyTable

    Raises:
        PolicyConfigError: If the file is missing, unparsable or invalid
    """
    table_path = get_policies_path(path)
    source = str(table_path)

    if not table_path.exists():
        raise PolicyConfigError([f"file not found: {table_path}"], source)

    try:
        with open(table_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PolicyConfigError([f"YAML parse error: {e}"], source)

    table = PolicyTable.from_dict(data, source=source)
    logger.debug(f"loaded pay cycle table {table.version or '(unversioned)'} "
                 f"with {len(table)} policies from {source}")
    return table


@lru_cache(maxsize=1)
def get_default_table() -> PolicyTable:
    """The table bundled with the package, loaded once."""
    return load_policy_table(DEFAULT_POLICIES_PATH)
