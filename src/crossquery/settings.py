"""Settings for CrossQuery criteria compilation."""

import re
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import FILTER_JOIN_MODES, QUERY_JOIN_MODES

JoinModeSetting = Union[int, float, str]

# Minimum-should-match forms accepted as join modes, e.g. "2", "-1", "75%", "3<90%"
_MINIMUM_SHOULD_MATCH = re.compile(r"^(-?\d+%?|(\d+<-?\d+%?\s*)+)$")
_TIE_BREAKER = re.compile(r"^\d*\.\d+$")


def validate_join_mode(value: Any) -> JoinModeSetting:
    """Validate a join mode value.

    Args:
        value: Mode name, number or minimum-should-match expression

    Returns:
        The validated mode

    Raises:
        ValueError: If the mode is not recognised
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid join mode: {value!r}")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        if value in QUERY_JOIN_MODES or value in FILTER_JOIN_MODES:
            return value
        if _MINIMUM_SHOULD_MATCH.match(value.strip()):
            return value
        if _TIE_BREAKER.match(value.strip()):
            # environment values arrive as strings
            return float(value)
    raise ValueError(f"Invalid join mode: {value!r}")


class CrossQuerySettings(BaseSettings):
    """CrossQuery configuration settings."""

    # Default join modes
    QUERY_MODE: JoinModeSetting = "must"
    FILTER_MODE: JoinModeSetting = "and"
    POST_FILTER_MODE: Optional[JoinModeSetting] = None  # falls back to FILTER_MODE

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class QueryConfig(BaseModel):
    """Join mode defaults consumed once by each new criteria.

    Attributes:
        query_mode: Mode used to join query clauses
        filter_mode: Mode used to join filter clauses
        post_filter_mode: Mode used to join post filter clauses, `None` to follow `filter_mode`
    """

    model_config = ConfigDict(frozen=True)

    query_mode: JoinModeSetting = "must"
    filter_mode: JoinModeSetting = "and"
    post_filter_mode: Optional[JoinModeSetting] = None

    @field_validator("query_mode", "filter_mode")
    @classmethod
    def _check_mode(cls, value: Any) -> JoinModeSetting:
        return validate_join_mode(value)

    @field_validator("post_filter_mode")
    @classmethod
    def _check_optional_mode(cls, value: Any) -> Optional[JoinModeSetting]:
        if value is None:
            return None
        return validate_join_mode(value)

    @classmethod
    def from_settings(cls, source: Optional[CrossQuerySettings] = None) -> "QueryConfig":
        """Build a config from a settings snapshot (the process-wide one by default)."""
        source = source or settings
        return cls(
            query_mode=source.QUERY_MODE,
            filter_mode=source.FILTER_MODE,
            post_filter_mode=source.POST_FILTER_MODE,
        )

    @property
    def resolved_post_filter_mode(self) -> JoinModeSetting:
        if self.post_filter_mode is None:
            return self.filter_mode
        return self.post_filter_mode

    def default_options(self) -> Dict[str, Any]:
        """Return the option seed every new criteria starts from."""
        return {
            "query_mode": self.query_mode,
            "filter_mode": self.filter_mode,
            "post_filter_mode": self.resolved_post_filter_mode,
        }


settings = CrossQuerySettings()
