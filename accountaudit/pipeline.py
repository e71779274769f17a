from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from accountaudit.models import AccountPair, AuditResult, CandidatePair, IdentityRecord, PairType
from accountaudit.stages.classify import classify_pair
from accountaudit.stages.grouping import group_by_local_part
from accountaudit.stages.pairing import find_candidate_pairs
from accountaudit.stages.recommend import build_recommendation
from accountaudit.utils import get_logger, now_utc

logger = get_logger(__name__)


def classify_candidates(candidates: Iterable[CandidatePair]) -> List[AccountPair]:
    out: List[AccountPair] = []
    for cp in candidates:
        verdict, rule = classify_pair(cp.original, cp.candidate)
        out.append(build_recommendation(cp, verdict, rule))
    return out


def run_audit(
    records: Iterable[IdentityRecord],
    pairing_cfg: Optional[Dict[str, Any]] = None,
    *,
    audit_id: Optional[str] = None,
) -> AuditResult:
    """Run grouping -> pairing -> classification -> recommendation in one pass.

    Pure with respect to ``records``: the same snapshot always yields the same
    ordered pairs. REAL pairs stay in the result; callers decide whether to
    report them.
    """
    pairing_cfg = pairing_cfg or {}
    records = list(records)

    groups, skipped = group_by_local_part(records)
    candidates = find_candidate_pairs(groups, suffix_pattern=pairing_cfg.get("suffix_pattern"))
    pairs = classify_candidates(candidates)

    counts = {pt.value: 0 for pt in PairType}
    for p in pairs:
        counts[p.pair_type.value] += 1
    logger.info(
        "classify: duplicate=%d suspicious=%d real=%d",
        counts[PairType.DUPLICATE.value],
        counts[PairType.SUSPICIOUS.value],
        counts[PairType.REAL.value],
    )

    return AuditResult(
        audit_id=audit_id,
        generated_at=now_utc().isoformat().replace("+00:00", "Z"),
        records=len(records),
        skipped=skipped,
        groups=len(groups),
        candidates=len(candidates),
        counts=counts,
        pairs=pairs,
    )
