# utils/employee_fields.py
# Legacy -> canonical field rules for employee documents.
from __future__ import annotations
import math, time, uuid
from typing import Callable, Dict, Optional, Tuple

LEGACY_TO_CANONICAL: Dict[str, str] = {
    "employeeid": "employee_id",
    "legalname": "legal_name",
    "hiredate": "hire_date",
    "preferredname": "preferred_name",
}

# legacy fields that migrate whenever the key holds a non-null value
NULL_CHECKED = {"preferredname"}


def is_filled(value) -> bool:
    """
    Truthiness for stored values: None, False, 0, NaN and "" are empty.
    Lists/dicts count as filled even when empty.
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def legacy_filter() -> dict:
    return {"$or": [{f: {"$exists": True}} for f in LEGACY_TO_CANONICAL]}


def missing_employee_id_filter() -> dict:
    return {"$or": [{"employee_id": {"$exists": False}}, {"employee_id": None}]}


def _legacy_usable(doc: dict, legacy: str) -> bool:
    if legacy in NULL_CHECKED:
        return doc.get(legacy) is not None
    return is_filled(doc.get(legacy))


def rename_ops(doc: dict) -> Tuple[dict, dict]:
    """
    Returns ($set, $unset) for one document. A legacy field is only moved when
    its canonical counterpart is empty; otherwise both are left as they are.
    """
    set_fields: dict = {}
    unset_fields: dict = {}
    for legacy, canonical in LEGACY_TO_CANONICAL.items():
        if _legacy_usable(doc, legacy) and not is_filled(doc.get(canonical)):
            set_fields[canonical] = doc[legacy]
            unset_fields[legacy] = ""
    return set_fields, unset_fields


def build_update(set_fields: dict, unset_fields: dict) -> Optional[dict]:
    ops = {}
    if set_fields:
        ops["$set"] = set_fields
    if unset_fields:
        ops["$unset"] = unset_fields
    return ops or None


# ---------- employee_id synthesis ----------
def now_ms() -> int:
    return int(time.time() * 1000)


def timestamp_employee_id(doc: dict, now: int) -> str:
    # emp-1700000000000-a1b2c3
    return f"emp-{now}-{str(doc['_id'])[-6:]}"


def uuid_employee_id(doc: dict, now: int) -> str:
    return f"emp-{uuid.uuid4().hex}"


ID_STRATEGIES: Dict[str, Callable[[dict, int], str]] = {
    "timestamp": timestamp_employee_id,
    "uuid": uuid_employee_id,
}
