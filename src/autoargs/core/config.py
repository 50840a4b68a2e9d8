"""Global configuration for AutoArgs.

This module provides centralized configuration management with support for
environment variables and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class AutoArgsConfig(BaseSettings):
    """AutoArgs configuration settings.

    Values can be overridden via environment variables with AUTOARGS_ prefix.
    Example: AUTOARGS_LABEL_MAX_LENGTH=60 overrides label_max_length.
    """

    # Mocking library detection
    mocking_library: str = Field(
        default="NSubstitute",
        min_length=1,
        description="Name searched for in the project's external references",
    )

    # Generated placeholder shape: <matcher_type_name>.<matcher_method_name><T>()
    matcher_type_name: str = Field(
        default="Arg",
        min_length=1,
        description="Type that hosts the match-any helper",
    )
    matcher_method_name: str = Field(
        default="Any",
        min_length=1,
        description="Generic match-any helper method",
    )

    # Action presentation
    action_title: str = Field(
        default="Add wildcard-match arguments",
        description="Title of a single action and of the overload group",
    )
    label_max_length: int = Field(
        default=50,
        ge=10,
        le=200,
        description="Maximum length of a per-overload action label",
    )

    # Rewrite formatting
    line_ending: Literal["lf", "crlf"] = Field(
        default="lf",
        description="Line break appended after a rewritten call",
    )

    model_config = {
        "env_prefix": "AUTOARGS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def newline(self) -> str:
        """Return the line break text for the configured line ending."""
        return "\r\n" if self.line_ending == "crlf" else "\n"


@lru_cache
def get_config() -> AutoArgsConfig:
    """Get cached configuration instance.

    Returns:
        AutoArgsConfig singleton instance.
    """
    return AutoArgsConfig()


def reload_config() -> AutoArgsConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh AutoArgsConfig instance.
    """
    get_config.cache_clear()
    return get_config()
