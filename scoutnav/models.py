"""scoutnav data models for ScoutSuite findings."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional


# ---------------------------------------------------------------------------
# Severity levels
# ---------------------------------------------------------------------------

DANGER: str = "danger"
WARNING: str = "warning"
INFO: str = "info"


# ---------------------------------------------------------------------------
# Field coercion helpers
# ---------------------------------------------------------------------------


def _str_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _int_field(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field '{key}' must be an integer, got {type(value).__name__}")
    return value


def _str_list_field(data: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"field '{key}' must be a list of strings")
    return tuple(value)


# ---------------------------------------------------------------------------
# ComplianceAnnotation model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ComplianceAnnotation:
    """A compliance standard a finding maps to (e.g. CIS 1.2.0, rule 1.4)."""

    name: str
    reference: str
    version: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComplianceAnnotation":
        if not isinstance(data, Mapping):
            raise ValueError("compliance entries must be objects")
        return cls(
            name=_str_field(data, "name"),
            reference=_str_field(data, "reference"),
            version=_str_field(data, "version"),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "reference": self.reference,
            "version": self.version,
        }


# ---------------------------------------------------------------------------
# Finding model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Finding:
    """A single flagged issue from a ScoutSuite report.

    Attributes:
        description: One-line summary shown while navigating.
        level: Severity level (``danger``, ``warning`` or ``info``).
        service: AWS service the finding belongs to.
        path: Report path of the affected resources.
        display_path: Path used by the ScoutSuite dashboard.
        dashboard_name: Resource kind label (e.g. "Buckets").
        items: Identifiers of the flagged resources.
        checked_items: Number of resources the rule inspected.
        flagged_items: Number of resources the rule flagged.
        rationale: Why the finding matters.
        remediation: How ScoutSuite suggests fixing it.
        references: Documentation URLs.
        compliance: Compliance annotations, or ``None`` when the report
            carries none.
    """

    description: str = ""
    level: str = ""
    service: str = ""
    path: str = ""
    display_path: str = ""
    dashboard_name: str = ""
    items: tuple[str, ...] = field(default_factory=tuple)
    checked_items: int = 0
    flagged_items: int = 0
    rationale: str = ""
    remediation: str = ""
    references: tuple[str, ...] = field(default_factory=tuple)
    compliance: Optional[tuple[ComplianceAnnotation, ...]] = None  # noqa: UP007

    @property
    def is_danger(self) -> bool:
        return self.level == DANGER

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Finding":  # noqa: UP007
        """Build a finding from its report representation.

        Missing fields fall back to empty values; a ``null`` finding becomes an
        empty, non-danger finding. Fields of the wrong type raise
        ``ValueError``.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError("finding must be an object")

        raw_compliance = data.get("compliance")
        compliance: Optional[tuple[ComplianceAnnotation, ...]] = None  # noqa: UP007
        if raw_compliance is not None:
            if not isinstance(raw_compliance, list):
                raise ValueError("field 'compliance' must be a list or null")
            compliance = tuple(
                ComplianceAnnotation.from_dict(entry) for entry in raw_compliance
            )

        return cls(
            description=_str_field(data, "description"),
            level=_str_field(data, "level"),
            service=_str_field(data, "service"),
            path=_str_field(data, "path"),
            display_path=_str_field(data, "display_path"),
            dashboard_name=_str_field(data, "dashboard_name"),
            items=_str_list_field(data, "items"),
            checked_items=_int_field(data, "checked_items"),
            flagged_items=_int_field(data, "flagged_items"),
            rationale=_str_field(data, "rationale"),
            remediation=_str_field(data, "remediation"),
            references=_str_list_field(data, "references"),
            compliance=compliance,
        )

    def to_dict(self) -> dict:
        """Return a JSON-serializable dictionary in report field order."""
        return {
            "checked_items": self.checked_items,
            "compliance": (
                [entry.to_dict() for entry in self.compliance]
                if self.compliance is not None
                else None
            ),
            "dashboard_name": self.dashboard_name,
            "description": self.description,
            "display_path": self.display_path,
            "flagged_items": self.flagged_items,
            "items": list(self.items),
            "level": self.level,
            "path": self.path,
            "rationale": self.rationale,
            "references": list(self.references),
            "remediation": self.remediation,
            "service": self.service,
        }


# ---------------------------------------------------------------------------
# Report model
# ---------------------------------------------------------------------------


@dataclass
class Report:
    """A parsed ScoutSuite report.

    Attributes:
        services: Service name -> finding id -> finding.
    """

    services: dict[str, dict[str, Finding]] = field(default_factory=dict)

    @property
    def total_findings(self) -> int:
        return sum(len(findings) for findings in self.services.values())
