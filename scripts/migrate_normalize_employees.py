# scripts/migrate_normalize_employees.py
"""
Normalize legacy employee documents to canonical field names.

  1) rename employeeid/legalname/hiredate/preferredname -> snake_case
  2) make sure every document has an employee_id (copy legacy or generate)
  3) unique (partial) index on employee_id

Safe to run more than once: migrated docs no longer match the scans.

Usage:
  python scripts/migrate_normalize_employees.py
  python scripts/migrate_normalize_employees.py --dry-run
  python scripts/migrate_normalize_employees.py --db hris_staging --collection employees --verify
  python scripts/migrate_normalize_employees.py --id-strategy uuid
"""
from __future__ import annotations
import os, sys, argparse
from typing import Callable

# --- bootstrap project root so "from db import col" works even if run from /scripts
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(THIS_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from db import col, DB_NAME, EMPLOYEES_COLLECTION  # noqa: E402
from utils.bootstrap_indexes import ensure_employee_id_index  # noqa: E402
from utils.employee_fields import (  # noqa: E402
    ID_STRATEGIES,
    build_update,
    is_filled,
    legacy_filter,
    missing_employee_id_filter,
    now_ms,
    rename_ops,
    timestamp_employee_id,
)


def _warn_if_not_indexed(doc_id, employee_id):
    # the unique index only covers string ids
    if not isinstance(employee_id, str):
        print(f"WARNING: _id {doc_id} gets non-string employee_id {employee_id!r}; "
              "it is not covered by the unique index", flush=True)


def rename_legacy_fields(c, commit: bool = True) -> int:
    count = 0
    for doc in c.find(legacy_filter()):
        ops = build_update(*rename_ops(doc))
        if ops is None:
            continue
        if "employee_id" in ops.get("$set", {}):
            _warn_if_not_indexed(doc["_id"], ops["$set"]["employee_id"])
        if not commit:
            count += 1
            print(f"Would migrate _id: {doc['_id']} "
                  f"set={sorted(ops.get('$set', {}))} unset={sorted(ops.get('$unset', {}))}", flush=True)
            continue
        res = c.update_one({"_id": doc["_id"]}, ops)
        if res.matched_count and res.modified_count:
            count += 1
            print(f"Migrated _id: {doc['_id']}", flush=True)
    return count


def backfill_employee_ids(
    c,
    commit: bool = True,
    make_id: Callable[[dict, int], str] = timestamp_employee_id,
    clock: Callable[[], int] = now_ms,
) -> int:
    count = 0
    for doc in c.find(missing_employee_id_filter()):
        # may have been filled since the scan started
        if is_filled(doc.get("employee_id")):
            continue

        legacy = doc.get("employeeid")
        if is_filled(legacy):
            ops = {"$set": {"employee_id": legacy}, "$unset": {"employeeid": ""}}
            note = f"from employeeid={legacy!r}"
            _warn_if_not_indexed(doc["_id"], legacy)
        else:
            generated = make_id(doc, clock())
            ops = {"$set": {"employee_id": generated}}
            note = f"generated {generated}"

        if commit:
            c.update_one({"_id": doc["_id"]}, ops)
            print(f"employee_id for _id {doc['_id']}: {note}", flush=True)
        else:
            print(f"Would set employee_id for _id {doc['_id']}: {note}", flush=True)
        count += 1
    return count


def run_migration(
    c,
    commit: bool = True,
    make_id: Callable[[dict, int], str] = timestamp_employee_id,
    clock: Callable[[], int] = now_ms,
    with_index: bool = True,
) -> dict:
    print(f"Starting employee normalization migration on {c.full_name}", flush=True)

    migrated = rename_legacy_fields(c, commit=commit)
    print(f"Created/updated documents: {migrated}", flush=True)

    print("Ensuring all docs have employee_id (generating where missing)...", flush=True)
    filled = backfill_employee_ids(c, commit=commit, make_id=make_id, clock=clock)
    print(f"Generated/filled employee_id for documents: {filled}", flush=True)

    index = "skipped"
    if with_index:
        print("Creating (unique) index on employee_id (partial to avoid nulls)...", flush=True)
        index = ensure_employee_id_index(c, commit=commit)

    print("Migration complete.", flush=True)
    return {"migrated": migrated, "filled": filled, "index": index}


def main(argv=None):
    ap = argparse.ArgumentParser(description="Rename legacy employee fields and backfill employee_id.")
    ap.add_argument("--dry-run", action="store_true", help="Report what would change; write nothing.")
    ap.add_argument("--db", default=DB_NAME, help=f"Database name (default: {DB_NAME}).")
    ap.add_argument("--collection", default=EMPLOYEES_COLLECTION,
                    help=f"Collection name (default: {EMPLOYEES_COLLECTION}).")
    ap.add_argument("--id-strategy", choices=sorted(ID_STRATEGIES), default="timestamp",
                    help="How missing employee_id values are generated.")
    ap.add_argument("--skip-index", action="store_true", help="Do not create the employee_id index.")
    ap.add_argument("--verify", action="store_true", help="Run the audit afterwards; exit 1 on violations.")
    args = ap.parse_args(argv)

    c = col(args.collection, db_name=args.db)
    run_migration(
        c,
        commit=not args.dry_run,
        make_id=ID_STRATEGIES[args.id_strategy],
        with_index=not args.skip_index,
    )
    if args.dry_run:
        print("(dry-run; nothing was written)", flush=True)

    if args.verify:
        from scripts.audit_employee_fields import audit, print_report
        report = audit(c)
        print_report(report)
        if not report["ok"]:
            sys.exit(1)


if __name__ == "__main__":
    main()
