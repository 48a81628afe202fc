import pytest

from scripts import audit_employee_fields


def test_audit_reports_missing_and_duplicate_ids(employees):
    employees.insert_many([
        {"_id": 1, "employee_id": "E-1"},
        {"_id": 2, "employee_id": "E-1"},
        {"_id": 3, "employee_id": None, "legalname": "Jane Doe"},
        {"_id": 4},
    ])
    report = audit_employee_fields.audit(employees)

    assert report["total"] == 4
    assert report["missing_employee_id"] == 2
    assert report["legacy_leftovers"]["legalname"] == 1
    assert report["legacy_leftovers"]["employeeid"] == 0
    assert report["duplicate_employee_ids"] == [{"employee_id": "E-1", "ids": ["1", "2"]}]
    assert report["ok"] is False


def test_main_exits_non_zero_on_violations(employees, monkeypatch, capsys):
    employees.insert_one({"_id": 1})
    monkeypatch.setattr(audit_employee_fields, "col", lambda name, db_name=None: employees)

    with pytest.raises(SystemExit) as exc:
        audit_employee_fields.main([])
    assert exc.value.code == 1
    assert "FAILED" in capsys.readouterr().out


def test_main_passes_on_clean_collection(employees, monkeypatch, capsys):
    employees.insert_one({"_id": 1, "employee_id": "E-1"})
    monkeypatch.setattr(audit_employee_fields, "col", lambda name, db_name=None: employees)

    audit_employee_fields.main([])
    assert capsys.readouterr().out.rstrip().endswith("OK")


def test_audit_lists_non_string_ids_without_failing(employees):
    employees.insert_many([{"_id": 1, "employee_id": 1042}, {"_id": 2, "employee_id": "E-2"}])
    report = audit_employee_fields.audit(employees)
    assert report["non_string_employee_ids"] == ["1"]
    assert report["ok"] is True
