"""Scaffold Wizard configuration.

Centralised, typed settings for the compatibility engine and the wizard
session. All settings use Pydantic v2 models so they can be validated at
construction time and serialised to/from JSON or environment variables
without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


_TRUTHY = {"1", "true", "yes", "on"}


class PerformanceConfig(BaseModel):
    """Instrumentation thresholds for compatibility evaluation.

    Exceeding a threshold records a diagnostic and, in debug mode, prints a
    developer warning. The evaluation itself always completes.
    """

    option_threshold_ms: float = Field(
        default=50.0, gt=0, description="Budget for a single option evaluation"
    )
    batch_threshold_ms: float = Field(
        default=100.0, gt=0, description="Budget for a full-step batch evaluation"
    )


class CacheConfig(BaseModel):
    """Result cache switches."""

    enabled: bool = Field(default=True, description="Serve repeated evaluations from cache")


class Config(BaseModel):
    """Global Scaffold Wizard configuration.

    Instances are typically created once per wizard session and then handed
    to the evaluator and the session glue.
    """

    debug: bool = Field(default=False, description="Print diagnostics to the developer console")
    max_diagnostics: int = Field(
        default=200, ge=0, description="How many diagnostic records the evaluator retains"
    )
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            WIZARD_DEBUG, WIZARD_MAX_DIAGNOSTICS, WIZARD_OPTION_THRESHOLD_MS,
            WIZARD_BATCH_THRESHOLD_MS, WIZARD_CACHE_ENABLED.
        """
        perf_kwargs: dict[str, Any] = {}
        if os.environ.get("WIZARD_OPTION_THRESHOLD_MS"):
            perf_kwargs["option_threshold_ms"] = float(os.environ["WIZARD_OPTION_THRESHOLD_MS"])
        if os.environ.get("WIZARD_BATCH_THRESHOLD_MS"):
            perf_kwargs["batch_threshold_ms"] = float(os.environ["WIZARD_BATCH_THRESHOLD_MS"])

        cache_kwargs: dict[str, Any] = {}
        if os.environ.get("WIZARD_CACHE_ENABLED"):
            cache_kwargs["enabled"] = os.environ["WIZARD_CACHE_ENABLED"].strip().lower() in _TRUTHY

        kwargs: dict[str, Any] = {}
        if os.environ.get("WIZARD_MAX_DIAGNOSTICS"):
            kwargs["max_diagnostics"] = int(os.environ["WIZARD_MAX_DIAGNOSTICS"])

        return cls(
            debug=os.environ.get("WIZARD_DEBUG", "").strip().lower() in _TRUTHY,
            performance=PerformanceConfig(**perf_kwargs),
            cache=CacheConfig(**cache_kwargs),
            **kwargs,
        )
