"""scoutnav utility helpers."""

import fnmatch
import json
import logging
import os

from scoutnav.config import REPORT_EXTENSION, REPORT_PATTERN
from scoutnav.errors import ReportAccessError
from scoutnav.models import Finding

logger = logging.getLogger(__name__)


def _raise_walk_error(exc: OSError) -> None:
    raise ReportAccessError(f"Error accessing file or directory: {exc}") from exc


def find_report_files(
    base_dir: str,
    *,
    pattern: str = REPORT_PATTERN,
    extension: str = REPORT_EXTENSION,
) -> list[str]:
    """Recursively collect files under *base_dir* whose name matches *pattern*.

    Matching is case-sensitive and applies to the file name only. A file must
    also end in *extension*.

    Args:
        base_dir: Directory to walk.
        pattern: Shell-style glob for the file name.
        extension: Required file name suffix.

    Returns:
        Sorted list of matching paths (joined onto *base_dir*).

    Raises:
        ReportAccessError: If any directory, including *base_dir* itself,
            cannot be listed. The walk stops at the first failure.
    """
    found: list[str] = []

    for dirpath, _dirnames, filenames in os.walk(base_dir, onerror=_raise_walk_error):
        for filename in filenames:
            if not filename.endswith(extension):
                continue
            if fnmatch.fnmatchcase(filename, pattern):
                path = os.path.join(dirpath, filename)
                logger.debug("Report candidate: %s", path)
                found.append(path)

    return sorted(found)


def finding_to_json(finding: Finding) -> str:
    """Render *finding* as indented JSON."""
    return json.dumps(finding.to_dict(), indent=3, ensure_ascii=False)
