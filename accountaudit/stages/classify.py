"""Ordered rule ladder that turns a candidate pair into a verdict.

Rules are evaluated top-down and the first match wins. The order is part of the
behaviour: several inputs satisfy more than one predicate (matching EmployeeId
and GUID satisfies rules 1, 2 and 3), so moving a rule changes verdicts.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from accountaudit.models import IdentityRecord, PairType

Predicate = Callable[[IdentityRecord, IdentityRecord], bool]

NO_MATCH = "no_match"


def _both_equal(a: Optional[str], b: Optional[str]) -> bool:
    return a is not None and b is not None and a == b


def _contains(haystack: Optional[str], needle: Optional[str]) -> bool:
    return haystack is not None and needle is not None and needle in haystack


def employee_id_and_guid_match(original: IdentityRecord, candidate: IdentityRecord) -> bool:
    return _both_equal(original.employee_id, candidate.employee_id) and _both_equal(original.guid, candidate.guid)


def guid_match(original: IdentityRecord, candidate: IdentityRecord) -> bool:
    return _both_equal(original.guid, candidate.guid)


def employee_id_match(original: IdentityRecord, candidate: IdentityRecord) -> bool:
    return _both_equal(original.employee_id, candidate.employee_id)


def employee_id_asymmetric(original: IdentityRecord, candidate: IdentityRecord) -> bool:
    return (original.employee_id is None) != (candidate.employee_id is None)


def employee_id_contains_guid(original: IdentityRecord, candidate: IdentityRecord) -> bool:
    # NOTE: rarely fires once rules 1-4 have run; kept for older defect patterns.
    return _contains(original.employee_id, candidate.guid) or _contains(candidate.guid, original.employee_id)


RULES: List[Tuple[str, Predicate, PairType]] = [
    ("employee_id_and_guid_match", employee_id_and_guid_match, PairType.DUPLICATE),
    ("guid_match", guid_match, PairType.DUPLICATE),
    ("employee_id_match", employee_id_match, PairType.SUSPICIOUS),
    ("employee_id_asymmetric", employee_id_asymmetric, PairType.SUSPICIOUS),
    ("employee_id_contains_guid", employee_id_contains_guid, PairType.SUSPICIOUS),
]


def classify_pair(original: IdentityRecord, candidate: IdentityRecord) -> Tuple[PairType, str]:
    """Return ``(verdict, rule_name)`` for the first matching rule, else REAL."""
    for name, predicate, verdict in RULES:
        if predicate(original, candidate):
            return verdict, name
    return PairType.REAL, NO_MATCH
