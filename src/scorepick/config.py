"""Configuration system for scorepick.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (SCOREPICK_*) -> .env file -> field defaults.

The sampling knobs live in :class:`GenerationPolicy`, an immutable model
handed to the sampler per call. :class:`ScorePickConfig` carries the default
policy values plus infrastructure fields. Per-call overrides are applied via
:func:`resolve_policy`, which builds a new policy without touching the
defaults. Infrastructure fields are protected from per-call override.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from scorepick.exceptions import ConfigValidationError

_OVERRIDE_PREFIX = "sp_"


class GenerationPolicy(BaseModel):
    """Sampling policy for one selection call.

    Attributes:
        temperature: 0 selects the arg-max deterministically; > 0 samples.
        top_k: Keep the k most probable candidates (0 disables).
        top_p: Nucleus threshold in (0, 1] (1.0 disables).
        repetition_penalty: Penalty base applied per prior emission (1.0 is neutral).
            0 drives a repeated positive score to +inf, which favours repeats.
        max_tokens: Step limit for the generation driver.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    temperature: float = Field(default=0.7, ge=0.0)
    top_k: int = Field(default=40, ge=0)
    top_p: float = Field(default=0.9, gt=0.0, le=1.0)
    repetition_penalty: float = Field(default=1.1, ge=0.0)
    max_tokens: int = Field(default=512, ge=1)

    @property
    def is_greedy(self) -> bool:
        """Whether this policy selects deterministically."""
        return self.temperature == 0.0


# Fields that can be overridden per call via sp_-prefixed keys.
_POLICY_FIELDS: frozenset[str] = frozenset(GenerationPolicy.model_fields.keys())


class ScorePickConfig(BaseSettings):
    """Configuration for scorepick.

    Resolution order: init kwargs -> env vars (SCOREPICK_*) -> .env file -> defaults.

    Fields are divided into two groups:
    - **Policy defaults**: temperature, top-k, top-p, repetition penalty and
      token limit. Overridable per call.
    - **Infrastructure**: random source, retrieval mismatch policy and
      logging. NOT overridable per call.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCOREPICK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Policy defaults (per-call overridable) ---

    temperature: float = Field(
        default=0.7,
        ge=0.0,
        description="Sampling temperature (0 = deterministic arg-max)",
    )
    top_k: int = Field(
        default=40,
        ge=0,
        description="Top-k filtering (0 disables)",
    )
    top_p: float = Field(
        default=0.9,
        gt=0.0,
        le=1.0,
        description="Nucleus sampling threshold (1.0 disables)",
    )
    repetition_penalty: float = Field(
        default=1.1,
        ge=0.0,
        description="Repetition penalty base (1.0 is neutral)",
    )
    max_tokens: int = Field(
        default=512,
        ge=1,
        description="Maximum tokens produced by the generation driver",
    )

    # --- Infrastructure (NOT per-call overridable) ---

    random_source_type: str = Field(
        default="system",
        description="Registered random source identifier",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed passed to random sources that accept one",
    )
    mismatch_policy: Literal["skip", "abort"] = Field(
        default="skip",
        description="Retrieval behaviour on query/candidate dimension mismatch",
    )

    # --- Logging ---

    log_level: Literal["none", "summary", "full"] = Field(
        default="summary",
        description="Selection logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store all selection records in memory for analysis",
    )

    def policy(self) -> GenerationPolicy:
        """Build the default GenerationPolicy from this config."""
        return GenerationPolicy(**self.model_dump(include=set(_POLICY_FIELDS)))


_ALL_FIELDS: frozenset[str] = frozenset(ScorePickConfig.model_fields.keys())


def _strip_prefix(key: str) -> str:
    if key.startswith(_OVERRIDE_PREFIX):
        return key[len(_OVERRIDE_PREFIX) :]
    return key


def validate_overrides(overrides: dict[str, Any] | None) -> None:
    """Validate all sp_* keys in *overrides* without building a policy.

    Args:
        overrides: Per-call overrides, potentially with the sp_ prefix.

    Raises:
        ConfigValidationError: If any sp_* key is unknown or non-overridable.
    """
    for key in overrides or {}:
        if not key.startswith(_OVERRIDE_PREFIX):
            continue
        field_name = _strip_prefix(key)
        if field_name not in _ALL_FIELDS:
            raise ConfigValidationError(
                f"Unknown config field: '{key}' (no field '{field_name}' exists)"
            )
        if field_name not in _POLICY_FIELDS:
            raise ConfigValidationError(
                f"Field '{field_name}' is an infrastructure field and cannot be "
                f"overridden per call"
            )


def resolve_policy(
    config: ScorePickConfig,
    overrides: dict[str, Any] | None,
    *,
    base: GenerationPolicy | None = None,
) -> GenerationPolicy:
    """Create a GenerationPolicy merging config defaults with per-call overrides.

    Override keys use the 'sp_' prefix (e.g., 'sp_top_k': 10). Keys without
    the prefix are silently ignored, they belong to other collaborators.

    Args:
        config: The base configuration loaded from environment.
        overrides: Per-call overrides.
        base: Pre-built default policy; returned as-is when nothing is overridden.

    Returns:
        A GenerationPolicy with overrides applied.

    Raises:
        ConfigValidationError: If a key is unknown, non-overridable, or its
            value fails validation.
    """
    default = base if base is not None else config.policy()
    if not overrides:
        return default

    validate_overrides(overrides)

    updates = {
        _strip_prefix(key): value
        for key, value in overrides.items()
        if key.startswith(_OVERRIDE_PREFIX)
    }
    if not updates:
        return default

    # model_copy(update=...) skips validation; model_validate coerces and checks.
    merged = default.model_dump()
    merged.update(updates)
    try:
        return GenerationPolicy.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid policy override: {exc}") from exc
