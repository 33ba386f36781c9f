"""Exception hierarchy for scoutnav.

Report, config and keyboard errors are fatal and end the CLI run.
Advisory errors are recoverable: the navigator reports them and keeps going.
"""


class ScoutNavError(Exception):
    """Base class for every error raised by scoutnav."""


class ConfigError(ScoutNavError):
    """Required configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Report ingestion
# ---------------------------------------------------------------------------


class ReportError(ScoutNavError):
    """Locating, reading or parsing the report failed."""


class ReportNotFoundError(ReportError):
    """No report file matched the naming convention."""


class AmbiguousReportError(ReportError):
    """More than one report file matched.

    Attributes:
        candidates: Every matching path, in sorted order.
    """

    def __init__(self, candidates: list[str]) -> None:
        self.candidates = list(candidates)
        super().__init__(
            "found too many report files, expected one: "
            + ", ".join(self.candidates)
        )


class ReportAccessError(ReportError):
    """The scan directory could not be traversed."""


class ReportReadError(ReportError):
    """The report file could not be read."""


class ReportParseError(ReportError):
    """The report is not valid JSON or does not have the expected shape."""


# ---------------------------------------------------------------------------
# Terminal
# ---------------------------------------------------------------------------


class KeyboardError(ScoutNavError):
    """Single-keypress input could not be set up or read."""


# ---------------------------------------------------------------------------
# Advisory client
# ---------------------------------------------------------------------------


class AdvisoryError(ScoutNavError):
    """The advisory request failed; callers may continue."""


class AdvisoryRequestError(AdvisoryError):
    """The HTTP request could not be sent or completed."""


class AdvisoryResponseError(AdvisoryError):
    """The HTTP response body could not be parsed."""
