from accountaudit.models import IdentityRecord
from accountaudit.stages.grouping import group_by_local_part


def _rec(rid, email):
    return IdentityRecord(id=rid, email=email)


def test_groups_case_insensitive_and_keeps_order():
    records = [
        _rec("1", "JDoe@co.com"),
        _rec("2", "asmith@co.com"),
        _rec("3", "jdoe@other.org"),
    ]
    groups, skipped = group_by_local_part(records)
    assert skipped == 0
    assert list(groups) == ["jdoe", "asmith"]
    assert [r.id for r in groups["jdoe"]] == ["1", "3"]
    # original domain is retained on the record
    assert groups["jdoe"][0].domain == "co.com"


def test_missing_or_malformed_email_skipped():
    records = [
        _rec("1", None),
        _rec("2", "   "),
        _rec("3", "no-at-sign.co.com"),
        _rec("4", "a@b@co.com"),
        _rec("5", "@co.com"),
        _rec("6", "ok@co.com"),
    ]
    groups, skipped = group_by_local_part(records)
    assert skipped == 5
    assert list(groups) == ["ok"]


def test_empty_input():
    groups, skipped = group_by_local_part([])
    assert groups == {}
    assert skipped == 0
