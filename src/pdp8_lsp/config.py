"""
Analyzer Configuration
======================

Settings that control an analysis run. Configuration can come from:
- Default values (defined here)
- The editor, through workspace/didChangeConfiguration
- Environment variables

Only one setting exists today:

    maxNumberOfProblems   problem budget per run (default: 100)

Editor settings are read from the ``pdp8Assembly`` section. The
``languageServerExample`` section used by early versions of the editor
extension is still accepted.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pdp8_lsp.errors import ConfigError

logger = logging.getLogger(__name__)

SETTINGS_SECTION = "pdp8Assembly"
LEGACY_SETTINGS_SECTION = "languageServerExample"
ENV_MAX_PROBLEMS = "PDP8_LSP_MAX_PROBLEMS"


def _positive_int(key: str, value: Any) -> int:
    # bool is an int subclass but never a sensible budget
    if isinstance(value, bool):
        raise ConfigError(key, value, "expected a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(key, value, "expected a positive integer") from None
    if number < 1:
        raise ConfigError(key, value, "expected a positive integer")
    return number


@dataclass
class LSPSettings:
    """
    Settings for the analyzer and language server.

    Attributes:
        max_number_of_problems: Problem budget limit per analysis run
    """

    max_number_of_problems: int = 100

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_dict(
        cls,
        settings: Optional[Mapping[str, Any]],
        strict: bool = False,
    ) -> "LSPSettings":
        """
        Create LSPSettings from an editor settings payload.

        Accepts the whole settings object ({"pdp8Assembly": {...}}) or just
        the section contents ({"maxNumberOfProblems": 50}).

        Args:
            settings: Settings object sent by the client (may be None)
            strict: Raise ConfigError on invalid values instead of keeping
                    the default

        Returns:
            LSPSettings with the values found in the payload
        """
        config = cls()
        if not settings:
            return config

        section = settings
        for name in (SETTINGS_SECTION, LEGACY_SETTINGS_SECTION):
            if isinstance(settings.get(name), Mapping):
                section = settings[name]
                break

        if (value := section.get("maxNumberOfProblems")) is not None:
            try:
                config.max_number_of_problems = _positive_int("maxNumberOfProblems", value)
            except ConfigError as e:
                if strict:
                    raise
                logger.warning(f"Ignoring setting: {e}")

        return config

    @classmethod
    def from_env(cls) -> "LSPSettings":
        """
        Create LSPSettings from environment variables.

        Environment variables (all optional):
            PDP8_LSP_MAX_PROBLEMS: Problem budget limit (positive integer)

        Returns:
            LSPSettings with values from environment variables
        """
        config = cls()

        if value := os.environ.get(ENV_MAX_PROBLEMS):
            try:
                config.max_number_of_problems = _positive_int(ENV_MAX_PROBLEMS, value)
            except ConfigError as e:
                logger.warning(f"Ignoring environment: {e}")

        return config
