"""Tuning constants for daily question selection.

Example:
    >>> settings = SelectorSettings.from_env()
    >>> settings.target_count
    10
"""

import os
from collections.abc import Mapping
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

ENV_PREFIX = "DAILYQUIZ_"


class SelectorSettings(BaseModel):
    """Configuration for generating and selecting the daily question set.

    The defaults are empirical: the generator is asked for 12 questions,
    the 10 least similar to the last 3 days are published, and the strict
    duplicate filter rejects anything at 0.45 Jaccard similarity or above.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target_count: int = Field(default=10, ge=1, description="Questions published per day")
    generate_count: int = Field(
        default=12, ge=1, description="Candidates requested from the generator"
    )
    duplicate_threshold: float = Field(default=0.45, ge=0.0, le=1.0)
    min_word_length: int = Field(default=3, ge=1)
    corpus_window_days: int = Field(
        default=3, ge=1, description="Days of published questions used as corpus"
    )
    timezone: str = Field(default="Asia/Kolkata")
    exclusion_limit: int = Field(
        default=30, ge=0, description="Max recent questions listed in the generator prompt"
    )
    exclusion_max_chars: int = Field(default=150, ge=1)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Require an IANA timezone name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: '{v}'") from e
        return v

    @model_validator(mode="after")
    def validate_counts(self) -> "SelectorSettings":
        """Generating fewer candidates than are published leaves nothing to drop."""
        if self.generate_count < self.target_count:
            raise ValueError(
                f"generate_count ({self.generate_count}) must be >= "
                f"target_count ({self.target_count})"
            )
        return self

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str = ENV_PREFIX,
        fit_generate_count: bool = False,
        **overrides: Any,
    ) -> "SelectorSettings":
        """Build settings from ``DAILYQUIZ_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            prefix: Variable name prefix.
            fit_generate_count: Raise ``generate_count`` to ``target_count``
                when the target asks for more questions than are generated.
            **overrides: Values that take precedence over the environment.

        Raises:
            pydantic.ValidationError: If a value cannot be parsed.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            key = f"{prefix}{name.upper()}"
            if key in environ:
                values[name] = environ[key]
        values.update({k: v for k, v in overrides.items() if v is not None})
        if fit_generate_count and "target_count" in values:
            target = TypeAdapter(int).validate_python(values["target_count"])
            generate = TypeAdapter(int).validate_python(
                values.get("generate_count", cls.model_fields["generate_count"].default)
            )
            values["generate_count"] = max(generate, target)
        return cls.model_validate(values)
