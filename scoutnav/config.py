"""scoutnav configuration constants and settings loading."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from scoutnav import __app_name__, __version__
from scoutnav.errors import ConfigError

APP_NAME: str = __app_name__
VERSION: str = __version__

# ---------------------------------------------------------------------------
# Report discovery
# ---------------------------------------------------------------------------

SCAN_DIR: str = "scans"
REPORT_PATTERN: str = "scoutsuite_results_aws-*.js"
REPORT_EXTENSION: str = ".js"

# ---------------------------------------------------------------------------
# Advisory endpoint
# ---------------------------------------------------------------------------

API_KEY_ENV: str = "OPENAI_API_KEY"
COMPLETIONS_URL: str = "https://api.openai.com/v1/completions"
COMPLETIONS_MODEL: str = "text-davinci-002"
COMPLETIONS_TEMPERATURE: float = 0.5
COMPLETIONS_MAX_TOKENS: int = 1024
COMPLETIONS_STOP: list[str] = ["\n"]


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the environment.

    Attributes:
        api_key: Bearer token for the completions endpoint.
    """

    api_key: str

    def __repr__(self) -> str:
        return "Settings(api_key='***')"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *environ* (defaults to ``os.environ``).

    Raises:
        ConfigError: If ``OPENAI_API_KEY`` is unset or empty.
    """
    env = os.environ if environ is None else environ
    api_key = env.get(API_KEY_ENV, "")
    if not api_key:
        raise ConfigError(f"{API_KEY_ENV} environment variable is required")
    return Settings(api_key=api_key)
