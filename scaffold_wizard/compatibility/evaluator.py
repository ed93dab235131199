"""Compatibility evaluation with result caching and fail-open error policy.

The evaluator answers "may the user pick option X on step Y right now?"
for a configuration snapshot. Results are cached under a fingerprint of
the fields the registered rules read, at two levels:

* option cache: ``(fingerprint, step, option) -> CompatibilityResult``
* step cache:   ``(fingerprint, step) -> {option: CompatibilityResult}``

Faults inside rules are contained: a predicate that raises counts as "not
triggered", a message generator that raises or returns blank text is
replaced by a fixed fallback, and any other failure reports the option as
compatible. Nothing raised inside the engine reaches the caller; every
swallowed fault becomes a :class:`~scaffold_wizard.models.Diagnostic`.
"""

from __future__ import annotations

import json
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from scaffold_wizard.compatibility.rules import CompatibilityRule, RuleRegistry, default_registry
from scaffold_wizard.config import Config
from scaffold_wizard.models import (
    CompatibilityResult,
    Diagnostic,
    DiagnosticKind,
    ScaffoldConfiguration,
)
from scaffold_wizard.utils import format_ms, print_error, print_info, print_summary_table, print_warning

FALLBACK_INCOMPATIBILITY_MESSAGE = "This option is not compatible with your current selections"

_ERROR_KINDS = {DiagnosticKind.EVALUATION_FAULT}


@dataclass
class EvaluationMetrics:
    """Counters kept per evaluator instance."""

    evaluation_count: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    batch_hits: int = 0
    batch_misses: int = 0
    invalidations: int = 0
    total_time_ms: float = 0.0

    @property
    def hit_rate(self) -> float:
        """Share of option lookups served from cache (0.0 when nothing ran)."""
        lookups = self.cache_hits + self.cache_misses
        return self.cache_hits / lookups if lookups else 0.0

    @property
    def average_time_ms(self) -> float:
        return self.total_time_ms / self.evaluation_count if self.evaluation_count else 0.0


@dataclass(frozen=True)
class RuleOutcome:
    """Result of calling a rule function: either a value or the fault it raised."""

    value: Any = None
    fault: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.fault is None


def _attempt(fn: Callable[[ScaffoldConfiguration], Any], config: ScaffoldConfiguration) -> RuleOutcome:
    try:
        return RuleOutcome(value=fn(config))
    except Exception as exc:
        return RuleOutcome(fault=exc)


class CompatibilityEvaluator:
    """Evaluates options against a rule registry, caching per fingerprint.

    Each instance owns its caches, metrics and diagnostics, so separate
    wizard sessions (or test cases) never observe each other's state. Not
    thread-safe: the wizard drives it from a single thread of control.
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        settings: Optional[Config] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.settings = settings or Config()
        self.metrics = EvaluationMetrics()
        self._clock = clock
        self._fields = set(self.registry.fingerprint_fields)
        self._option_cache: dict[tuple[str, str, str], CompatibilityResult] = {}
        self._step_cache: dict[tuple[str, str], dict[str, CompatibilityResult]] = {}
        self._diagnostics: deque[Diagnostic] = deque(maxlen=self.settings.max_diagnostics)

    # -- Public API --------------------------------------------------------

    def fingerprint(self, config: ScaffoldConfiguration) -> str:
        """Stable cache key prefix built from the fields rules declare they read."""
        relevant = {
            name: value
            for name, value in config.model_dump(mode="json").items()
            if name in self._fields
        }
        return json.dumps(relevant, sort_keys=True, separators=(",", ":"))

    def evaluate(
        self, step_id: str, option_value: str, config: ScaffoldConfiguration
    ) -> CompatibilityResult:
        """Decide whether *option_value* on *step_id* is selectable under *config*.

        Never raises. Options with no matching rule are compatible.
        """
        started = self._clock()
        try:
            key = (self.fingerprint(config), step_id, option_value)
            if self.settings.cache.enabled:
                cached = self._option_cache.get(key)
                if cached is not None:
                    self.metrics.cache_hits += 1
                    self._finish(started)
                    return cached
            self.metrics.cache_misses += 1
            result = self._evaluate_rules(step_id, option_value, config)
            if self.settings.cache.enabled:
                self._option_cache[key] = result
        except Exception as exc:
            self._report(
                Diagnostic(
                    kind=DiagnosticKind.EVALUATION_FAULT,
                    step_id=str(step_id),
                    option=_as_text(option_value),
                    detail=str(exc),
                    error_type=type(exc).__name__,
                )
            )
            result = CompatibilityResult.compatible()

        elapsed = self._finish(started)
        if elapsed > self.settings.performance.option_threshold_ms:
            self._report(
                Diagnostic(
                    kind=DiagnosticKind.SLOW_EVALUATION,
                    step_id=str(step_id),
                    option=_as_text(option_value),
                    detail=(
                        f"took {format_ms(elapsed)} "
                        f"(threshold: {format_ms(self.settings.performance.option_threshold_ms)})"
                    ),
                    elapsed_ms=elapsed,
                )
            )
        return result

    def evaluate_batch(
        self,
        step_id: str,
        option_values: Iterable[str],
        config: ScaffoldConfiguration,
    ) -> dict[str, CompatibilityResult]:
        """Evaluate every option of a step as one cached unit.

        Returns a fresh dict (in the order of *option_values*) that callers may
        mutate freely.
        """
        started = self._clock()
        options = list(option_values)
        try:
            step_key = (self.fingerprint(config), step_id)
        except Exception as exc:
            self._report(
                Diagnostic(
                    kind=DiagnosticKind.EVALUATION_FAULT,
                    step_id=str(step_id),
                    detail=str(exc),
                    error_type=type(exc).__name__,
                )
            )
            return {option: CompatibilityResult.compatible() for option in options}

        cached = self._step_cache.get(step_key) if self.settings.cache.enabled else None
        if cached is not None and all(option in cached for option in options):
            self.metrics.batch_hits += 1
            if self.settings.debug:
                print_info(
                    f'[Compatibility] Step-level cache hit for "{step_id}" '
                    f"({format_ms(self._elapsed_ms(started))})"
                )
            return {option: cached[option] for option in options}

        self.metrics.batch_misses += 1
        entry = dict(cached or {})
        for option in options:
            if option not in entry:
                entry[option] = self.evaluate(step_id, option, config)
        if self.settings.cache.enabled:
            self._step_cache[step_key] = entry

        elapsed = self._elapsed_ms(started)
        if self.settings.debug:
            print_info(
                f'[Compatibility] Step-level evaluation for "{step_id}" completed in '
                f"{format_ms(elapsed)} ({len(options)} options)"
            )
        if elapsed > self.settings.performance.batch_threshold_ms:
            self._report(
                Diagnostic(
                    kind=DiagnosticKind.SLOW_BATCH,
                    step_id=step_id,
                    detail=(
                        f"{len(options)} options took {format_ms(elapsed)} "
                        f"(threshold: {format_ms(self.settings.performance.batch_threshold_ms)})"
                    ),
                    elapsed_ms=elapsed,
                )
            )
        return {option: entry[option] for option in options}

    def invalidate(self) -> None:
        """Drop every cached result, option-level and step-level alike."""
        self._option_cache.clear()
        self._step_cache.clear()
        self.metrics.invalidations += 1
        if self.settings.debug:
            print_info("[Compatibility] Caches invalidated")

    # -- Introspection -----------------------------------------------------

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def clear_diagnostics(self) -> None:
        self._diagnostics.clear()

    def reset_metrics(self) -> None:
        self.metrics = EvaluationMetrics()

    def cache_size(self) -> tuple[int, int]:
        """``(option entries, step entries)`` currently cached."""
        return len(self._option_cache), len(self._step_cache)

    def print_metrics(self) -> None:
        """Render the evaluator's counters on the developer console."""
        m = self.metrics
        print_summary_table(
            {
                "Evaluations": m.evaluation_count,
                "Cache hits": m.cache_hits,
                "Cache misses": m.cache_misses,
                "Hit rate": f"{m.hit_rate:.0%}",
                "Step-level hits": m.batch_hits,
                "Step-level misses": m.batch_misses,
                "Invalidations": m.invalidations,
                "Average time": format_ms(m.average_time_ms),
                "Diagnostics": len(self._diagnostics),
            },
            title="Compatibility metrics",
        )

    # -- Internals ---------------------------------------------------------

    def _evaluate_rules(
        self, step_id: str, option_value: str, config: ScaffoldConfiguration
    ) -> CompatibilityResult:
        rules = self.registry.rules_for(step_id, option_value)
        if not rules:
            return CompatibilityResult.compatible()

        triggered: list[tuple[CompatibilityRule, str]] = []
        for rule in rules:
            verdict = _attempt(lambda cfg, r=rule: bool(r.is_incompatible(cfg)), config)
            if not verdict.ok:
                self._report(self._fault(DiagnosticKind.PREDICATE_FAULT, rule, option_value, verdict.fault))
                continue
            if verdict.value:
                triggered.append((rule, self._resolve_message(rule, option_value, config)))

        if not triggered:
            return CompatibilityResult.compatible()

        # min() keeps the first of equal priorities, i.e. registration order.
        winner, message = min(triggered, key=lambda pair: pair[0].priority)
        return CompatibilityResult(
            is_compatible=False,
            reason=message,
            conflicting_field=winner.conflicting_field,
            conflicting_value=_conflicting_value(winner, config),
        )

    def _resolve_message(
        self, rule: CompatibilityRule, option_value: str, config: ScaffoldConfiguration
    ) -> str:
        outcome = _attempt(rule.get_message, config)
        if not outcome.ok:
            self._report(self._fault(DiagnosticKind.MESSAGE_FAULT, rule, option_value, outcome.fault))
            return FALLBACK_INCOMPATIBILITY_MESSAGE
        message = outcome.value
        if not isinstance(message, str) or not message.strip():
            self._report(
                Diagnostic(
                    kind=DiagnosticKind.EMPTY_MESSAGE,
                    step_id=rule.target_step,
                    option=_as_text(option_value),
                    rule_id=rule.id,
                    detail="returned empty message, using fallback",
                )
            )
            return FALLBACK_INCOMPATIBILITY_MESSAGE
        return message

    @staticmethod
    def _fault(
        kind: DiagnosticKind, rule: CompatibilityRule, option_value: str, fault: Optional[Exception]
    ) -> Diagnostic:
        return Diagnostic(
            kind=kind,
            step_id=rule.target_step,
            option=_as_text(option_value),
            rule_id=rule.id,
            detail=str(fault),
            error_type=type(fault).__name__ if fault is not None else None,
        )

    def _report(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)
        if not self.settings.debug:
            return
        if diagnostic.kind in _ERROR_KINDS:
            print_error(diagnostic.render())
        else:
            print_warning(diagnostic.render())

    def _elapsed_ms(self, started: float) -> float:
        return (self._clock() - started) * 1000.0

    def _finish(self, started: float) -> float:
        elapsed = self._elapsed_ms(started)
        self.metrics.evaluation_count += 1
        self.metrics.total_time_ms += elapsed
        return elapsed


def _conflicting_value(rule: CompatibilityRule, config: ScaffoldConfiguration) -> Optional[str]:
    if rule.conflicting_field is None:
        return None
    value = getattr(config, rule.conflicting_field, None)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)
