"""Interactive finding navigator.

Shows one finding at a time as a summary line plus a help line, and reacts
to single key presses. Each redraw erases the two lines drawn previously so
navigation does not scroll the terminal.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from rich.console import Console
from rich.control import Control
from rich.markup import escape
from rich.segment import ControlType
from rich.text import Text

from scoutnav.ai.advisor import AdvisoryClient, build_question
from scoutnav.errors import AdvisoryRequestError, AdvisoryResponseError
from scoutnav.models import Finding
from scoutnav.ui.keyboard import KeyReader
from scoutnav.utils import finding_to_json

logger = logging.getLogger(__name__)

HELP_LINE: str = (
    "[j] for next, [k] for previous, [p] for info, [d] for devops, [q] to quit"
)

_DRAWN_LINES = 2


@dataclass
class NavigatorState:
    """Position within a fixed-length list of findings."""

    total: int
    index: int = 0

    def __post_init__(self) -> None:
        if self.total < 1:
            raise ValueError("navigator needs at least one finding")
        self.index = min(max(self.index, 0), self.total - 1)

    def next(self) -> None:
        self.index = min(self.index + 1, self.total - 1)

    def previous(self) -> None:
        self.index = max(self.index - 1, 0)


class Navigator:
    """Key-driven event loop over danger findings.

    Args:
        findings: Non-empty list of findings; never modified.
        console: Where everything is rendered.
        advisor: Client used by the ``d`` command.
        read_key: Blocking callable returning the next key press.
    """

    def __init__(
        self,
        findings: Sequence[Finding],
        *,
        console: Console,
        advisor: AdvisoryClient,
        read_key: KeyReader,
    ) -> None:
        self.findings = tuple(findings)
        self.state = NavigatorState(total=len(self.findings))
        self.console = console
        self.advisor = advisor
        self.read_key = read_key
        self._drawn = False

    @property
    def current(self) -> Finding:
        return self.findings[self.state.index]

    # --- loop ---

    def run(self) -> None:
        """Render and dispatch keys until ``q`` is pressed."""
        self.render()
        while self.handle_key(self.read_key()):
            self.render()

    def handle_key(self, key: str) -> bool:
        """Apply *key*; return ``False`` when the session should end."""
        if key == "j":
            self.state.next()
        elif key == "k":
            self.state.previous()
        elif key == "p":
            self.show_finding()
        elif key == "d":
            self.ask_advisor()
        elif key == "q":
            return False
        else:
            logger.debug("Ignoring key %r", key)
        return True

    # --- rendering ---

    def render(self) -> None:
        """Redraw the summary and help lines in place."""
        if self._drawn:
            for _ in range(_DRAWN_LINES):
                self.console.control(
                    Control.move(0, -1),
                    Control((ControlType.ERASE_IN_LINE, 2)),
                )

        summary = Text(self.current.description, style="bold")
        summary.append(f" ({self.state.index + 1} of {self.state.total})", style="dim")
        self.console.print(summary, no_wrap=True, overflow="ellipsis", crop=True)
        self.console.print(HELP_LINE, markup=False, highlight=False, no_wrap=True, crop=True)
        self._drawn = True

    def show_finding(self) -> None:
        """Print the current finding as indented JSON."""
        self.console.print(
            finding_to_json(self.current), markup=False, highlight=False, soft_wrap=True
        )
        self._drawn = False

    def ask_advisor(self) -> None:
        """Ask the advisory endpoint how to fix the current finding."""
        question = build_question(self.current)

        try:
            with self.console.status("Asking the advisor…"):
                answer = self.advisor.ask(question)
        except AdvisoryRequestError as exc:
            self.console.print(f"[bold red]Error sending the request:[/bold red] {escape(str(exc))}")
        except AdvisoryResponseError as exc:
            self.console.print(f"[bold red]Error parsing the response:[/bold red] {escape(str(exc))}")
        else:
            if answer is None:
                self.console.print("[yellow]No answer found[/yellow]")
            else:
                self.console.print(f"[bold green]Answer:[/bold green] {escape(answer)}")

        self._drawn = False
