from pymongo.errors import OperationFailure

EMPLOYEE_ID_INDEX = "employee_id_1"
# $ne is not allowed in partial index filters; employee ids are strings
EMPLOYEE_ID_PARTIAL = {"employee_id": {"$exists": True, "$type": "string"}}

# IndexOptionsConflict / IndexKeySpecsConflict
_CONFLICT_CODES = (85, 86)

def _has_unique_employee_id_index(c) -> bool:
    for info in c.index_information().values():
        keys = [k for k, _ in info.get("key", [])]
        if keys == ["employee_id"] and info.get("unique"):
            return True
    return False

def ensure_employee_id_index(c, commit=True) -> str:
    """
    Unique index on employee_id, partial so absent/null ids never collide.
    Returns "created", "exists", "failed" or "skipped" (dry-run).
    """
    if not commit:
        print("(dry-run) index creation skipped.", flush=True)
        return "skipped"

    if _has_unique_employee_id_index(c):
        print("Index already present.", flush=True)
        return "exists"

    try:
        c.create_index(
            "employee_id",
            name=EMPLOYEE_ID_INDEX,
            unique=True,
            partialFilterExpression=EMPLOYEE_ID_PARTIAL,
        )
    except OperationFailure as e:
        # a conflicting index only counts if it already enforces uniqueness
        if e.code in _CONFLICT_CODES and _has_unique_employee_id_index(c):
            print(f"Index already present (server said: {e})", flush=True)
            return "exists"
        print(f"Index creation warning: {e}", flush=True)
        return "failed"

    print("Index created.", flush=True)
    return "created"
