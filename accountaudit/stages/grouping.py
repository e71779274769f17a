from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from accountaudit.models import IdentityRecord
from accountaudit.utils import get_logger

logger = get_logger(__name__)


def group_by_local_part(records: Iterable[IdentityRecord]) -> Tuple[Dict[str, List[IdentityRecord]], int]:
    """Partition records by lower-cased email local-part.

    Returns ``(groups, skipped)``. Records without an email, or whose email does
    not split into exactly one local-part and one domain, are left out and only
    counted; that is the normal state of unlicensed or service accounts.
    Input order is kept within each group.
    """
    groups: Dict[str, List[IdentityRecord]] = {}
    skipped = 0
    total = 0
    for rec in records:
        total += 1
        local = rec.local_part
        if local is None:
            skipped += 1
            logger.debug("grouping: skip id=%s email=%r", rec.id, rec.email)
            continue
        groups.setdefault(local.lower(), []).append(rec)

    logger.info("grouping: groups=%d from=%d skipped=%d", len(groups), total, skipped)
    return groups, skipped
