"""Read identity records from a JSON snapshot of a directory export.

The snapshot is produced by whatever queries the directory (Graph, LDAP dump,
...). Accepted shapes: a bare list of user objects, or an object whose
``value`` key holds that list (Graph paging response).
"""

import json
from typing import Any, Dict, List, Optional

from accountaudit.models import IdentityRecord
from accountaudit.utils import get_logger

logger = get_logger(__name__)

# IdentityRecord field -> dotted path in the exported user object.
DEFAULT_FIELD_MAP: Dict[str, str] = {
    "id": "id",
    "display_name": "displayName",
    "email": "mail",
    "employee_id": "employeeId",
    "provisioning_status": "onPremisesExtensionAttributes.extensionAttribute1",
    "employee_type": "onPremisesExtensionAttributes.extensionAttribute2",
    "guid": "onPremisesExtensionAttributes.extensionAttribute3",
    "start_date": "onPremisesExtensionAttributes.extensionAttribute4",
    "end_date": "onPremisesExtensionAttributes.extensionAttribute5",
    "external_system_id": "onPremisesExtensionAttributes.extensionAttribute6",
}


def _lookup(obj: Any, path: str) -> Optional[Any]:
    cur = obj
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
        if cur is None:
            return None
    return cur


def parse_records(payload: Any, field_map: Optional[Dict[str, str]] = None) -> List[IdentityRecord]:
    mapping = dict(DEFAULT_FIELD_MAP)
    if field_map:
        unknown = set(field_map) - set(mapping)
        if unknown:
            raise ValueError(f"Unknown record fields in field_map: {sorted(unknown)}")
        mapping.update(field_map)

    if isinstance(payload, dict):
        payload = payload.get("value")
    if not isinstance(payload, list):
        raise ValueError("Snapshot must be a list of user objects or an object with a 'value' list")

    records: List[IdentityRecord] = []
    for raw in payload:
        if not isinstance(raw, dict):
            logger.warning("snapshot: ignoring non-object entry %r", raw)
            continue
        records.append(IdentityRecord(**{field: _lookup(raw, path) for field, path in mapping.items()}))
    return records


def fetch(source_cfg: Dict[str, Any]) -> List[IdentityRecord]:
    path = source_cfg["path"]
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    records = parse_records(payload, source_cfg.get("field_map"))
    logger.info("snapshot: loaded records=%d path=%s", len(records), path)
    return records
