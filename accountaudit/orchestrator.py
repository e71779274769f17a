import time
import uuid
from typing import Any, Dict, List, Optional

import yaml

from accountaudit.models import AuditResult, IdentityRecord
from accountaudit.pipeline import run_audit
from accountaudit.sources import snapshot_adapter
from accountaudit.utils import write_output, validate_config, get_logger

logger = get_logger(__name__)


def _fetch_records(source_cfg: Dict[str, Any]) -> List[IdentityRecord]:
    """Fetch records from configured source."""
    t = source_cfg["type"]
    if t == "snapshot":
        return snapshot_adapter.fetch(source_cfg)
    else:
        raise ValueError(f"Unknown source type: {t}")


def _apply_overrides(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    if not overrides:
        return

    if overrides.get("snapshot") is not None:
        cfg.setdefault("source", {})["path"] = overrides["snapshot"]
    if overrides.get("suffix_pattern") is not None:
        cfg.setdefault("pairing", {})["suffix_pattern"] = overrides["suffix_pattern"]

    if overrides.get("out_dir") is not None or overrides.get("include_real") is not None:
        out = cfg.setdefault("output", {})
        if overrides.get("out_dir") is not None:
            out["dir"] = overrides["out_dir"]
        if overrides.get("include_real") is not None:
            out["include_real"] = bool(overrides["include_real"])


def build_report(result: AuditResult, include_real: bool = False) -> Dict[str, Any]:
    """Serialise an audit result; REAL pairs only appear when asked for."""
    js = result.model_dump(mode="json")
    if not include_real:
        js["pairs"] = [p for p in js["pairs"] if p["pair_type"] != "REAL"]
    js["actionable"] = len(result.actionable_pairs)
    return js


def _execute_pipeline(cfg: Dict[str, Any], run_id: str, overrides: Optional[Dict[str, Any]] = None) -> AuditResult:
    """Execute the audit with given configuration."""
    _apply_overrides(cfg, overrides)
    validate_config(cfg)

    audit_id = cfg["audit_id"]
    logger.info("config loaded audit_id=%s source=%s", audit_id, cfg["source"]["type"])

    t0 = time.monotonic()
    records = _fetch_records(cfg["source"])
    logger.info("fetched records=%d took_ms=%d", len(records), int((time.monotonic()-t0)*1000))

    t1 = time.monotonic()
    result = run_audit(records, cfg.get("pairing"), audit_id=audit_id)
    logger.info(
        "audited candidates=%d actionable=%d took_ms=%d",
        result.candidates,
        len(result.actionable_pairs),
        int((time.monotonic()-t1)*1000),
    )

    out_cfg = cfg["output"]
    js = build_report(result, include_real=bool(out_cfg.get("include_real")))
    generated_files = write_output(js, out_cfg)
    logger.info("output written dir=%s files=%s", out_cfg["dir"], generated_files)

    logger.info("OK: audit %s finished (run %s).", audit_id, run_id)
    return result


def run_once(
    config_path: str,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> AuditResult:
    """Execute the audit once with given config file path."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
        if not isinstance(cfg, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")
        return _execute_pipeline(cfg, run_id, overrides)

    except Exception as e:
        logger.error("Audit execution failed: %s", e)
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)
