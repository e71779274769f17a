"""Record and result models shared by the audit stages.

``IdentityRecord`` is the normalised, immutable view of one directory user.
``AccountPair`` and ``AuditResult`` are the output contract handed to whatever
renders or exports the audit; nothing downstream should need to know how a pair
was derived.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

EXTENSION_FIELDS = (
    "provisioning_status",
    "employee_type",
    "guid",
    "start_date",
    "end_date",
    "external_system_id",
)


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        # nested or otherwise unreadable attribute values count as absent
        return None
    value = value.strip()
    return value or None


def split_email(email: Optional[str]) -> Optional[Tuple[str, str]]:
    """Return ``(local_part, domain)`` or ``None`` for missing/malformed addresses."""
    if not email or email.count("@") != 1:
        return None
    local, domain = email.split("@")
    if not local or not domain:
        return None
    return local, domain


class IdentityRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    display_name: Optional[str] = None
    email: Optional[str] = None
    employee_id: Optional[str] = None
    provisioning_status: Optional[str] = None
    employee_type: Optional[str] = None
    guid: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    external_system_id: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return _blank_to_none(v) or ""

    @field_validator(
        "display_name",
        "email",
        "employee_id",
        *EXTENSION_FIELDS,
        mode="before",
    )
    @classmethod
    def _absent_if_blank(cls, v: Any) -> Optional[str]:
        return _blank_to_none(v)

    @property
    def local_part(self) -> Optional[str]:
        parts = split_email(self.email)
        return parts[0] if parts else None

    @property
    def domain(self) -> Optional[str]:
        parts = split_email(self.email)
        return parts[1] if parts else None


class PairType(str, Enum):
    DUPLICATE = "DUPLICATE"
    SUSPICIOUS = "SUSPICIOUS"
    REAL = "REAL"


@dataclass(frozen=True)
class CandidatePair:
    """An (original, suffixed) pair before classification."""

    original: IdentityRecord
    candidate: IdentityRecord


class AccountPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    original: IdentityRecord
    candidate: IdentityRecord
    pair_type: PairType
    matched_rule: str
    needs_guid: bool = False
    needs_start_date: bool = False
    recommended_action: Optional[str] = None
    note: Optional[str] = None
    status: str

    @property
    def actionable(self) -> bool:
        return self.pair_type is not PairType.REAL

    def to_row(self) -> Dict[str, Any]:
        """Flatten both records and the verdict into one dict (table/CSV friendly)."""
        row: Dict[str, Any] = {}
        for prefix, rec in (("original", self.original), ("candidate", self.candidate)):
            for key, value in rec.model_dump().items():
                row[f"{prefix}_{key}"] = value
        row.update(
            {
                "pair_type": self.pair_type.value,
                "matched_rule": self.matched_rule,
                "needs_guid": self.needs_guid,
                "needs_start_date": self.needs_start_date,
                "recommended_action": self.recommended_action,
                "note": self.note,
                "status": self.status,
            }
        )
        return row


class AuditResult(BaseModel):
    audit_id: Optional[str] = None
    generated_at: str
    records: int
    skipped: int
    groups: int
    candidates: int
    counts: Dict[str, int]
    pairs: List[AccountPair]

    @property
    def actionable_pairs(self) -> List[AccountPair]:
        return [p for p in self.pairs if p.actionable]
