from __future__ import annotations

from accountaudit.models import AccountPair, CandidatePair, IdentityRecord, PairType

SUSPICIOUS_NOTE = (
    "Both accounts carry the same EmployeeId. Two distinct accounts sharing a "
    "business key point to a provisioning defect upstream; confirm with the "
    "account owner before deleting."
)
ASYMMETRIC_NOTE = (
    "Only one of the two accounts carries an EmployeeId. Identity data split "
    "across a base and a suffixed account usually means an incomplete "
    "provisioning run; confirm with the account owner before deleting."
)
CORRELATION_NOTE = (
    "One account's EmployeeId and the other's GUID overlap, a weak sign of a "
    "provisioning defect; confirm with the account owner before deleting."
)

NOTES_BY_RULE = {
    "employee_id_match": SUSPICIOUS_NOTE,
    "employee_id_asymmetric": ASYMMETRIC_NOTE,
    "employee_id_contains_guid": CORRELATION_NOTE,
}


def _needs(original_value, candidate_value) -> bool:
    return original_value is None and candidate_value is not None


def _merge_hint(needs_guid: bool, needs_start_date: bool) -> str:
    fields = []
    if needs_guid:
        fields.append("GUID")
    if needs_start_date:
        fields.append("StartDate")
    if not fields:
        return ""
    return f"copy {' and '.join(fields)} to original, then "


def _label(rec: IdentityRecord) -> str:
    return rec.email or rec.id


def build_recommendation(pair: CandidatePair, pair_type: PairType, matched_rule: str) -> AccountPair:
    """Attach merge/deletion guidance to a classified pair.

    The suffixed ``candidate`` is always the account proposed for removal. The
    needs flags say which attributes the original lacks but the candidate has,
    so they can be carried over before the candidate goes away.
    """
    original, candidate = pair.original, pair.candidate

    if pair_type is PairType.REAL:
        return AccountPair(
            original=original,
            candidate=candidate,
            pair_type=pair_type,
            matched_rule=matched_rule,
            status="Reviewed, no action",
        )

    needs_guid = _needs(original.guid, candidate.guid)
    needs_start_date = _needs(original.start_date, candidate.start_date)
    hint = _merge_hint(needs_guid, needs_start_date)
    target = _label(candidate)

    if pair_type is PairType.DUPLICATE:
        action = f"Delete {target}"
        if hint:
            action = f"{hint[0].upper()}{hint[1:]}delete {target}"
        return AccountPair(
            original=original,
            candidate=candidate,
            pair_type=pair_type,
            matched_rule=matched_rule,
            needs_guid=needs_guid,
            needs_start_date=needs_start_date,
            recommended_action=action,
            status=f"Duplicate of {_label(original)}: safe to merge and delete",
        )

    return AccountPair(
        original=original,
        candidate=candidate,
        pair_type=pair_type,
        matched_rule=matched_rule,
        needs_guid=needs_guid,
        needs_start_date=needs_start_date,
        recommended_action=f"Verify, then {hint}delete {target}",
        note=NOTES_BY_RULE.get(matched_rule, SUSPICIOUS_NOTE),
        status=f"Suspicious match with {_label(original)}: manual verification required",
    )
