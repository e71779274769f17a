from __future__ import annotations

import re
from typing import Dict, List, Optional, Pattern, Tuple, Union

from accountaudit.models import CandidatePair, IdentityRecord
from accountaudit.utils import get_logger

logger = get_logger(__name__)

# A single stray digit appended to an otherwise identical local-part.
DEFAULT_SUFFIX_PATTERN = r"^(?P<base>.+?)(?P<suffix>\d)$"


def compile_suffix_pattern(pattern: Union[str, Pattern[str], None]) -> Pattern[str]:
    if pattern is None:
        pattern = DEFAULT_SUFFIX_PATTERN
    if isinstance(pattern, str):
        try:
            pattern = re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid suffix pattern {pattern!r}: {e}") from e
    missing = {"base", "suffix"} - set(pattern.groupindex)
    if missing:
        raise ValueError(f"Suffix pattern must define named groups 'base' and 'suffix' (missing: {sorted(missing)})")
    return pattern


def split_suffix(key: str, pattern: Union[str, Pattern[str], None] = None) -> Optional[Tuple[str, str]]:
    """Split a group key into ``(base, suffix)``; ``None`` when it carries no suffix."""
    m = compile_suffix_pattern(pattern).match(key)
    if not m:
        return None
    base, suffix = m.group("base"), m.group("suffix")
    if not base or not suffix or base == key:
        return None
    return base, suffix


def _same_domain(a: IdentityRecord, b: IdentityRecord) -> bool:
    da, db = a.domain, b.domain
    return da is not None and db is not None and da.lower() == db.lower()


def find_candidate_pairs(
    groups: Dict[str, List[IdentityRecord]],
    *,
    suffix_pattern: Union[str, Pattern[str], None] = None,
) -> List[CandidatePair]:
    """Enumerate (original, candidate) pairs for every suffixed key with a base group.

    For a suffixed key the full cross product ``base group x suffixed group`` is
    emitted, filtered to same-domain pairs, so its size is bounded by
    ``len(base) * len(suffixed)``. Either side may hold several unrelated people
    whose local-parts collide. Keys are visited in lexicographic order and
    groups keep input order, so the output order is stable across runs.
    """
    pat = compile_suffix_pattern(suffix_pattern)
    out: List[CandidatePair] = []
    matched_keys = 0

    for key in sorted(groups):
        parts = split_suffix(key, pat)
        if parts is None:
            continue
        base_key, _ = parts
        base_group = groups.get(base_key)
        if not base_group:
            continue
        matched_keys += 1
        for original in base_group:
            for candidate in groups[key]:
                if _same_domain(original, candidate):
                    out.append(CandidatePair(original=original, candidate=candidate))

    logger.info("pairing: candidates=%d suffixed_keys=%d groups=%d", len(out), matched_keys, len(groups))
    return out
