import json

import pytest

from accountaudit.sources.snapshot_adapter import fetch, parse_records


def _user(**kw):
    ext = kw.pop("ext", {})
    base = {"id": kw.pop("id", "u1"), "displayName": "J Doe", "mail": "jdoe@co.com"}
    base.update(kw)
    if ext:
        base["onPremisesExtensionAttributes"] = ext
    return base


def test_parse_graph_shape_with_extensions():
    payload = {
        "value": [
            _user(employeeId="E1", ext={"extensionAttribute3": "G1", "extensionAttribute4": "2024-01-01"}),
            _user(id="u2", mail=None),
        ]
    }
    recs = parse_records(payload)
    assert len(recs) == 2
    assert recs[0].employee_id == "E1"
    assert recs[0].guid == "G1"
    assert recs[0].start_date == "2024-01-01"
    assert recs[0].end_date is None
    assert recs[1].email is None


def test_field_map_override_and_numeric_values():
    payload = [{"id": 7, "mail": "a@co.com", "custom": {"guid": 1234}, "employeeId": "  "}]
    recs = parse_records(payload, {"guid": "custom.guid"})
    assert recs[0].id == "7"
    assert recs[0].guid == "1234"
    assert recs[0].employee_id is None


def test_unknown_field_map_key_rejected():
    with pytest.raises(ValueError):
        parse_records([], {"nickname": "x"})


def test_bad_payload_shape():
    with pytest.raises(ValueError):
        parse_records({"users": []})


def test_fetch_reads_file(tmp_path):
    p = tmp_path / "users.json"
    p.write_text(json.dumps([_user(), _user(id="u2", mail="jdoe1@co.com")]), encoding="utf-8")
    recs = fetch({"type": "snapshot", "path": str(p)})
    assert [r.email for r in recs] == ["jdoe@co.com", "jdoe1@co.com"]


def test_fetch_missing_file_propagates(tmp_path):
    with pytest.raises(FileNotFoundError):
        fetch({"type": "snapshot", "path": str(tmp_path / "missing.json")})
