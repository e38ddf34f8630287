"""Claim store snapshot handling.

Converts claim rows as exported by the claim store into Claim records.

Completed work is anchored to its completion date and paid from the
final file total, falling back to the pay amount entered at dispatch.
Scheduled work is anchored to its appointment and paid from the entered
pay amount, falling back to the firm's standard fee.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .firms import normalize_firm_name
from .policies import PolicyTable
from .schemas import Claim, parse_date

logger = logging.getLogger(__name__)


class ClaimsFileError(Exception):
    """Raised when a claims snapshot cannot be read."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Invalid claims snapshot: {'; '.join(errors)}")


def _amount(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def claim_from_record(record: Dict[str, Any], table: Optional[PolicyTable] = None) -> Claim:
    """Build a Claim from a claim store row.

    Args:
        record: Row with id, firm_name, status, completion_date,
                appointment_start, file_total, pay_amount
        table: Policy table used for the standard-fee fallback on
               scheduled work. Without it, scheduled claims carry only
               their entered pay amount.

    Returns:
        Claim (work_date is None if the row has no usable date)
    """
    firm_raw = record.get("firm_name") or record.get("firm") or ""
    status = str(record.get("status") or "")
    file_total = _amount(record.get("file_total"))
    pay_amount = _amount(record.get("pay_amount"))

    completion = parse_date(record.get("completion_date"))
    appointment = parse_date(record.get("appointment_start"))

    if status.strip().upper() == "COMPLETED" and completion:
        work_date = completion
        candidates = [file_total, pay_amount]
    elif appointment:
        work_date = appointment
        candidates = [pay_amount]
        fee = table.fee_for(normalize_firm_name(firm_raw)) if table else None
        if fee is not None:
            candidates.append(fee.base_fee)
    else:
        work_date = None
        candidates = [file_total, pay_amount]

    return Claim(
        id=str(record.get("id", "")),
        firm_raw=firm_raw,
        work_date=work_date,
        amount_candidates=candidates,
        status=status,
    )


def claims_from_records(
    records: List[Dict[str, Any]],
    table: Optional[PolicyTable] = None,
) -> List[Claim]:
    """Convert a list of rows, collecting every bad row.

    Raises:
        ClaimsFileError: If any row is malformed
    """
    claims = []
    errors = []
    for idx, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append(f"row {idx}: expected an object")
            continue
        if record.get("id") in (None, ""):
            errors.append(f"row {idx}: missing id")
            continue
        try:
            claims.append(claim_from_record(record, table))
        except (ValueError, ValidationError) as e:
            errors.append(f"row {idx} (id {record.get('id')}): {e}")

    if errors:
        raise ClaimsFileError(errors)
    return claims


def load_claims(path: Path, table: Optional[PolicyTable] = None) -> List[Claim]:
    """Load a JSON claims snapshot.

    Accepts either a list of rows or an object with a "claims" list.

    Raises:
        FileNotFoundError: If path doesn't exist
        ClaimsFileError: If the file is not valid JSON or has bad rows
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Claims snapshot not found: {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ClaimsFileError([f"{path.name}: {e}"])

    if isinstance(data, dict):
        data = data.get("claims")
    if not isinstance(data, list):
        raise ClaimsFileError([f"{path.name}: expected a list of claims or {{\"claims\": [...]}}"])

    claims = claims_from_records(data, table)
    logger.debug(f"loaded {len(claims)} claims from {path}")
    return claims
