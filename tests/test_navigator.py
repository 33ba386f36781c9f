"""Unit tests for the interactive navigator and keyboard handling."""

import io
import itertools
import json
import os

import pytest
from rich.console import Console

from scoutnav.errors import AdvisoryRequestError, AdvisoryResponseError, KeyboardError
from scoutnav.models import DANGER, Finding
from scoutnav.ui.keyboard import open_keyboard
from scoutnav.ui.navigator import HELP_LINE, Navigator, NavigatorState

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class StubAdvisor:
    """Returns a canned answer, or raises a canned error."""

    def __init__(self, answer: str | None = None, error: Exception | None = None) -> None:
        self.answer = answer
        self.error = error
        self.questions: list[str] = []

    def ask(self, question: str) -> str | None:
        self.questions.append(question)
        if self.error is not None:
            raise self.error
        return self.answer


def _findings(count: int = 3) -> list[Finding]:
    return [
        Finding(description=f"Finding number {n}", level=DANGER, service="s3")
        for n in range(1, count + 1)
    ]


def _navigator(
    keys: str,
    *,
    findings: list[Finding] | None = None,
    advisor: StubAdvisor | None = None,
) -> tuple[Navigator, io.StringIO]:
    out = io.StringIO()
    key_iter = iter(keys)
    navigator = Navigator(
        findings if findings is not None else _findings(),
        console=Console(file=out, width=200),
        advisor=advisor or StubAdvisor(),  # type: ignore[arg-type]
        read_key=lambda: next(key_iter),
    )
    return navigator, out


# ---------------------------------------------------------------------------
# NavigatorState tests
# ---------------------------------------------------------------------------


class TestNavigatorState:
    """Tests for index clamping."""

    def test_starts_at_zero(self) -> None:
        """A new state points at the first finding."""
        assert NavigatorState(total=3).index == 0

    def test_next_clamps_at_last(self) -> None:
        """next() at the last index is a no-op."""
        state = NavigatorState(total=2, index=1)
        state.next()
        assert state.index == 1

    def test_previous_clamps_at_zero(self) -> None:
        """previous() at index 0 is a no-op."""
        state = NavigatorState(total=2)
        state.previous()
        assert state.index == 0

    def test_empty_list_rejected(self) -> None:
        """A navigator over zero findings cannot be created."""
        with pytest.raises(ValueError):
            NavigatorState(total=0)

    def test_index_always_in_bounds(self) -> None:
        """Any j/k sequence should keep the index within [0, total-1]."""
        for total in range(1, 5):
            for moves in itertools.product("jk", repeat=6):
                state = NavigatorState(total=total)
                for move in moves:
                    state.next() if move == "j" else state.previous()
                    assert 0 <= state.index <= total - 1


# ---------------------------------------------------------------------------
# Navigator tests
# ---------------------------------------------------------------------------


class TestNavigator:
    """Tests for key dispatch and rendering."""

    def test_initial_render(self) -> None:
        """The first render shows the first finding, counter, and help."""
        navigator, out = _navigator("q")
        navigator.run()

        output = out.getvalue()
        assert "Finding number 1 (1 of 3)" in output
        assert HELP_LINE in output

    def test_next_and_previous(self) -> None:
        """j and k move through the list."""
        navigator, out = _navigator("jjkq")
        navigator.run()

        output = out.getvalue()
        assert "Finding number 2 (2 of 3)" in output
        assert "Finding number 3 (3 of 3)" in output
        assert navigator.state.index == 1

    def test_next_at_end_is_noop(self) -> None:
        """Pressing j past the end stays on the last finding."""
        navigator, _ = _navigator("jjjjjq")
        navigator.run()
        assert navigator.state.index == 2

    def test_previous_at_start_is_noop(self) -> None:
        """Pressing k at the start stays on the first finding."""
        navigator, _ = _navigator("kkq")
        navigator.run()
        assert navigator.state.index == 0

    def test_unknown_keys_ignored(self) -> None:
        """Keys outside the command set change nothing."""
        navigator, _ = _navigator("jx \x1b?q")
        navigator.run()
        assert navigator.state.index == 1

    def test_quit_stops_reading(self) -> None:
        """No key after q is consumed."""
        consumed = []
        keys = iter("qj")

        def read_key() -> str:
            key = next(keys)
            consumed.append(key)
            return key

        navigator = Navigator(
            _findings(),
            console=Console(file=io.StringIO()),
            advisor=StubAdvisor(),  # type: ignore[arg-type]
            read_key=read_key,
        )
        navigator.run()
        assert consumed == ["q"]

    def test_print_shows_round_trippable_json(self) -> None:
        """p prints the current finding as JSON that parses back equal."""
        findings = _findings()
        navigator, out = _navigator("jpq", findings=findings)
        navigator.run()

        output = out.getvalue()
        start = output.index("{")
        end = output.rindex("}") + 1
        assert Finding.from_dict(json.loads(output[start:end])) == findings[1]

    def test_advisor_answer_printed(self) -> None:
        """d prints the trimmed answer."""
        advisor = StubAdvisor(answer="Do X.")
        navigator, out = _navigator("dq", advisor=advisor)
        navigator.run()

        assert "Answer: Do X." in out.getvalue()
        assert "Finding number 1" in advisor.questions[0]

    def test_advisor_no_answer_continues(self) -> None:
        """An empty answer is reported, the index is kept and the loop goes on."""
        advisor = StubAdvisor(answer=None)
        navigator, out = _navigator("jdq", advisor=advisor)
        navigator.run()

        output = out.getvalue()
        assert "No answer found" in output
        assert navigator.state.index == 1
        assert output.count("Finding number 2 (2 of 3)") == 2

    def test_advisor_request_error_is_recoverable(self) -> None:
        """Network failures are printed and navigation continues."""
        advisor = StubAdvisor(error=AdvisoryRequestError("connection refused"))
        navigator, out = _navigator("djq", advisor=advisor)
        navigator.run()

        output = out.getvalue()
        assert "Error sending the request: connection refused" in output
        assert navigator.state.index == 1

    def test_advisor_response_error_is_recoverable(self) -> None:
        """Unparseable responses are printed and navigation continues."""
        advisor = StubAdvisor(error=AdvisoryResponseError("Expecting value"))
        navigator, out = _navigator("dq", advisor=advisor)
        navigator.run()

        assert "Error parsing the response: Expecting value" in out.getvalue()

    def test_key_read_failure_propagates(self) -> None:
        """A keyboard failure inside the loop is fatal."""

        def read_key() -> str:
            raise KeyboardError("end of input while waiting for a key")

        navigator = Navigator(
            _findings(),
            console=Console(file=io.StringIO()),
            advisor=StubAdvisor(),  # type: ignore[arg-type]
            read_key=read_key,
        )
        with pytest.raises(KeyboardError):
            navigator.run()


# ---------------------------------------------------------------------------
# Keyboard tests
# ---------------------------------------------------------------------------


class TestOpenKeyboard:
    """Tests for scoped single-key terminal mode."""

    def test_non_terminal_stream_raises(self) -> None:
        """A stream without a terminal cannot enter cbreak mode."""
        with pytest.raises(KeyboardError):
            with open_keyboard(io.StringIO()):
                pass

    def test_reads_keys_and_restores_mode(self) -> None:
        """Keys are read one at a time and terminal attributes are restored."""
        pty = pytest.importorskip("pty")
        termios = pytest.importorskip("termios")

        master, slave = pty.openpty()
        try:
            with os.fdopen(slave, "r", closefd=False) as stream:
                before = termios.tcgetattr(slave)

                with open_keyboard(stream) as read_key:
                    assert termios.tcgetattr(slave) != before
                    os.write(master, b"jq")
                    assert read_key() == "j"
                    assert read_key() == "q"

                assert termios.tcgetattr(slave) == before
        finally:
            os.close(master)
            os.close(slave)

    def test_ctrl_c_is_an_ordinary_key(self) -> None:
        """Ctrl-C is read as a key instead of raising KeyboardInterrupt."""
        pty = pytest.importorskip("pty")
        termios = pytest.importorskip("termios")

        master, slave = pty.openpty()
        try:
            with os.fdopen(slave, "r", closefd=False) as stream:
                with open_keyboard(stream) as read_key:
                    assert not termios.tcgetattr(slave)[3] & termios.ISIG
                    os.write(master, b"\x03")
                    assert read_key() == "\x03"
        finally:
            os.close(master)
            os.close(slave)

    def test_navigator_ignores_ctrl_c(self) -> None:
        """Signal keys do not end the session; only q does."""
        pty = pytest.importorskip("pty")

        master, slave = pty.openpty()
        try:
            with os.fdopen(slave, "r", closefd=False) as stream:
                with open_keyboard(stream) as read_key:
                    os.write(master, b"\x03j\x1aq")
                    navigator = Navigator(
                        _findings(),
                        console=Console(file=io.StringIO()),
                        advisor=StubAdvisor(),  # type: ignore[arg-type]
                        read_key=read_key,
                    )
                    navigator.run()
            assert navigator.state.index == 1
        finally:
            os.close(master)
            os.close(slave)

    def test_restores_mode_on_error(self) -> None:
        """Terminal attributes are restored when the block raises."""
        pty = pytest.importorskip("pty")
        termios = pytest.importorskip("termios")

        master, slave = pty.openpty()
        try:
            with os.fdopen(slave, "r", closefd=False) as stream:
                before = termios.tcgetattr(slave)
                with pytest.raises(RuntimeError):
                    with open_keyboard(stream):
                        raise RuntimeError("boom")
                assert termios.tcgetattr(slave) == before
        finally:
            os.close(master)
            os.close(slave)
