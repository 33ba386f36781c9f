"""Report ingestion pipeline.

Locates the single ScoutSuite export under the scan directory, strips the
JavaScript assignment that precedes the JSON payload, parses it into a
:class:`~scoutnav.models.Report` and keeps only the danger-level findings.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from scoutnav.config import SCAN_DIR
from scoutnav.errors import (
    AmbiguousReportError,
    ReportNotFoundError,
    ReportParseError,
    ReportReadError,
)
from scoutnav.models import DANGER, Finding, Report
from scoutnav.utils import find_report_files

logger = logging.getLogger(__name__)


def locate_report(base_dir: str = SCAN_DIR) -> str:
    """Return the path of the one report file under *base_dir*.

    Raises:
        ReportNotFoundError: If no file matches.
        AmbiguousReportError: If more than one file matches.
        ReportAccessError: If the directory cannot be traversed.
    """
    candidates = find_report_files(base_dir)

    if not candidates:
        raise ReportNotFoundError(f"no report files found under '{base_dir}'")

    if len(candidates) > 1:
        raise AmbiguousReportError(candidates)

    return candidates[0]


def read_report(path: str | Path) -> bytes:
    """Read the raw bytes of the report at *path*."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ReportReadError(f"could not read report {path}: {exc}") from exc


def strip_report_prefix(raw: bytes) -> bytes:
    """Drop everything before the first ``{`` (the ``scoutsuite_results =`` prefix)."""
    start = raw.find(b"{")
    if start == -1:
        raise ReportParseError("report does not contain a JSON object")
    return raw[start:]


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ReportParseError(f"{what} must be a JSON object")
    return value


def parse_report(raw: bytes) -> Report:
    """Parse raw report bytes into a :class:`Report`.

    Raises:
        ReportParseError: If the payload is not valid JSON or does not
            have the ``services -> findings`` shape.
    """
    try:
        document = json.loads(strip_report_prefix(raw).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ReportParseError(f"error unmarshalling report JSON: {exc}") from exc

    if not isinstance(document, Mapping):
        raise ReportParseError("report root must be a JSON object")

    report = Report()
    for service_name, service in _mapping(document.get("services"), "services").items():
        findings = _mapping(service, f"service '{service_name}'").get("findings")
        parsed: dict[str, Finding] = {}
        for finding_id, data in _mapping(findings, f"'{service_name}' findings").items():
            try:
                parsed[finding_id] = Finding.from_dict(data)
            except ValueError as exc:
                raise ReportParseError(
                    f"invalid finding '{service_name}.{finding_id}': {exc}"
                ) from exc
        report.services[service_name] = parsed

    return report


def filter_danger_findings(report: Report) -> list[Finding]:
    """Return every danger-level finding across all services.

    Order follows the report's service and finding iteration order.
    """
    return [
        finding
        for findings in report.services.values()
        for finding in findings.values()
        if finding.level == DANGER
    ]


def read_findings(path: str | Path) -> list[Finding]:
    """Read and parse the report at *path*, keeping danger findings."""
    report = parse_report(read_report(path))
    findings = filter_danger_findings(report)

    logger.info(
        "Loaded %d danger findings out of %d across %d services",
        len(findings),
        report.total_findings,
        len(report.services),
    )
    return findings


def load_findings(base_dir: str = SCAN_DIR) -> list[Finding]:
    """Locate the report under *base_dir* and return its danger findings."""
    path = locate_report(base_dir)
    logger.info("Report: %s", path)
    return read_findings(path)
