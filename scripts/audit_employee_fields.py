# scripts/audit_employee_fields.py
# --- path bootstrap so `from db import col` works when run as a script ---
import os, sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
# -------------------------------------------------------------------------

import argparse
from db import col, DB_NAME, EMPLOYEES_COLLECTION
from utils.employee_fields import LEGACY_TO_CANONICAL, missing_employee_id_filter


def audit(c):
    total = c.count_documents({})
    missing = c.count_documents(missing_employee_id_filter())
    leftovers = {f: c.count_documents({f: {"$ne": None}}) for f in LEGACY_TO_CANONICAL}

    dupes = []
    pipeline = [
        {"$match": {"employee_id": {"$ne": None}}},
        {"$group": {"_id": "$employee_id", "ids": {"$push": "$_id"}, "n": {"$sum": 1}}},
        {"$match": {"n": {"$gt": 1}}},
    ]
    for row in c.aggregate(pipeline):
        dupes.append({"employee_id": row["_id"], "ids": [str(i) for i in row["ids"]]})

    # outside the partial unique index
    non_string = [str(d["_id"]) for d in c.find({"employee_id": {"$ne": None}}, {"employee_id": 1})
                  if not isinstance(d["employee_id"], str)]

    return {
        "total": total,
        "missing_employee_id": missing,
        "legacy_leftovers": leftovers,
        "duplicate_employee_ids": dupes,
        "non_string_employee_ids": non_string,
        "ok": missing == 0 and not dupes,
    }


def print_report(report):
    print("==== EMPLOYEE FIELD AUDIT ====")
    print(f"documents total: {report['total']}")
    print(f"missing employee_id: {report['missing_employee_id']}")
    for f, n in report["legacy_leftovers"].items():
        print(f"legacy {f} still present: {n}")
    print(f"duplicate employee_id values: {len(report['duplicate_employee_ids'])}")
    for d in report["duplicate_employee_ids"]:
        print(f"  {d['employee_id']} => {d['ids']}")
    if report["non_string_employee_ids"]:
        print(f"non-string employee_id (not covered by the unique index): {report['non_string_employee_ids']}")
    print("OK" if report["ok"] else "FAILED")


def main(argv=None):
    ap = argparse.ArgumentParser(description="Check employee documents after normalization.")
    ap.add_argument("--db", default=DB_NAME)
    ap.add_argument("--collection", default=EMPLOYEES_COLLECTION)
    args = ap.parse_args(argv)

    report = audit(col(args.collection, db_name=args.db))
    print_report(report)
    if not report["ok"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
