"""AI-powered remediation advisor.

Sends the current finding to an OpenAI-style completions endpoint and
returns the first completion as a short remediation answer.

Failures here are never fatal: callers get an :class:`AdvisoryError`
and carry on.
"""

import logging
from typing import Any, Optional

import requests

from scoutnav.config import (
    COMPLETIONS_MAX_TOKENS,
    COMPLETIONS_MODEL,
    COMPLETIONS_STOP,
    COMPLETIONS_TEMPERATURE,
    COMPLETIONS_URL,
    Settings,
)
from scoutnav.errors import AdvisoryRequestError, AdvisoryResponseError
from scoutnav.models import Finding
from scoutnav.utils import finding_to_json

logger = logging.getLogger(__name__)

QUESTION_PREFIX: str = (
    "I got the following report from Scout Suite... can you please write me "
    "a short step by step tutorial for fixing in my aws account: "
)


def build_question(finding: Finding) -> str:
    """Return the remediation question for *finding*."""
    return QUESTION_PREFIX + finding_to_json(finding)


class AdvisoryClient:
    """Synchronous client for the completions endpoint.

    Args:
        settings: Resolved settings providing the API key.
        session: Object with a ``requests.Session``-compatible ``post``.
            A new session is created when omitted.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[requests.Session] = None,  # noqa: UP007
        url: str = COMPLETIONS_URL,
        model: str = COMPLETIONS_MODEL,
    ) -> None:
        self.settings = settings
        self.session = session if session is not None else requests.Session()
        self.url = url
        self.model = model

    def build_payload(self, question: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "prompt": [
                {"role": "agent", "content": "Scout Suite report:"},
                {"role": "user", "content": question},
                {"role": "agent", "content": "Answer:"},
            ],
            "temperature": COMPLETIONS_TEMPERATURE,
            "max_tokens": COMPLETIONS_MAX_TOKENS,
            "stop": list(COMPLETIONS_STOP),
        }

    def ask(self, question: str) -> Optional[str]:  # noqa: UP007
        """Send *question* and return the trimmed first completion.

        Returns:
            The answer text, or ``None`` when the response has no choices.

        Raises:
            AdvisoryRequestError: On connection or transport failures.
            AdvisoryResponseError: When the body is not the expected JSON.
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key}",
        }
        logger.debug("POST %s (model=%s)", self.url, self.model)

        try:
            response = self.session.post(
                self.url, headers=headers, json=self.build_payload(question)
            )
        except requests.RequestException as exc:
            raise AdvisoryRequestError(str(exc)) from exc

        if not response.ok:
            logger.warning("Advisory endpoint returned HTTP %s", response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise AdvisoryResponseError(str(exc)) from exc

        return _first_choice_text(body)


def _first_choice_text(body: Any) -> Optional[str]:  # noqa: UP007
    if not isinstance(body, dict):
        raise AdvisoryResponseError("response body must be a JSON object")

    choices = body.get("choices") or []
    if not isinstance(choices, list):
        raise AdvisoryResponseError("'choices' must be a list")
    if not choices:
        return None

    first = choices[0]
    if not isinstance(first, dict):
        raise AdvisoryResponseError("choice must be a JSON object")
    text = first.get("text") or ""
    if not isinstance(text, str):
        raise AdvisoryResponseError("choice 'text' must be a string")
    return text.strip()
