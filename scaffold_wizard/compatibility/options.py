"""Consumer-facing façade that annotates step options for rendering.

The rendering layer asks for a step's options and gets each one back with
``is_disabled`` and a human-readable ``incompatibility_reason``. The
provider reads the current snapshot from the :class:`ConfigStore` and
clears the evaluator's caches whenever a field the rules read changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Optional

from pydantic import Field

from scaffold_wizard.compatibility.evaluator import CompatibilityEvaluator
from scaffold_wizard.models import CompatibilityResult, ScaffoldConfiguration
from scaffold_wizard.steps.catalog import StepOption
from scaffold_wizard.utils import print_error, print_info

if TYPE_CHECKING:
    from scaffold_wizard.store import ConfigStore


class OptionWithCompatibility(StepOption):
    """A step option annotated with its current compatibility verdict."""

    is_disabled: bool = Field(default=False)
    incompatibility_reason: Optional[str] = Field(default=None)


# Single-valued selections re-checked by has_incompatibilities(), as
# (step id, configuration field).
_SELECTION_FIELDS: tuple[tuple[str, str], ...] = (
    ("frontend", "frontend_framework"),
    ("backend", "backend_framework"),
    ("database", "database"),
    ("auth", "auth"),
    ("styling", "styling"),
    ("ai-provider", "ai_provider"),
)


class OptionProvider:
    """Annotates options with enabled/disabled state for the current config."""

    def __init__(self, evaluator: CompatibilityEvaluator, store: ConfigStore) -> None:
        self.evaluator = evaluator
        self.store = store
        self._unsubscribe: Optional[Callable[[], None]] = store.subscribe(self._on_change)

    def close(self) -> None:
        """Stop listening to the store."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # -- Public API --------------------------------------------------------

    def is_option_compatible(self, step_id: str, option: str) -> CompatibilityResult:
        try:
            return self.evaluator.evaluate(step_id, option, self.store.snapshot)
        except Exception as exc:
            self._log_failure(f'evaluate step "{step_id}", option "{option}"', exc)
            return CompatibilityResult.compatible()

    def get_compatible_options(
        self, step_id: str, options: Iterable[StepOption]
    ) -> list[OptionWithCompatibility]:
        """Return *options* annotated with their compatibility verdicts."""
        options = list(options)
        try:
            results = self.evaluator.evaluate_batch(
                step_id, [option.value for option in options], self.store.snapshot
            )
        except Exception as exc:
            self._log_failure(f'annotate options for step "{step_id}"', exc)
            results = {}

        annotated: list[OptionWithCompatibility] = []
        for option in options:
            result = results.get(option.value)
            annotated.append(
                OptionWithCompatibility(
                    **option.model_dump(),
                    is_disabled=bool(result is not None and not result.is_compatible),
                    incompatibility_reason=result.reason if result is not None else None,
                )
            )
        return annotated

    def has_incompatibilities(self) -> bool:
        """True if any value the user has already selected is itself disabled.

        Re-checks the current selections only, not every candidate option.
        """
        config = self.store.snapshot
        try:
            return any(
                not self.is_option_compatible(step_id, value).is_compatible
                for step_id, value in self._selected_values(config)
            )
        except Exception as exc:
            self._log_failure("check selections for incompatibilities", exc)
            return False

    # -- Internals ---------------------------------------------------------

    @staticmethod
    def _selected_values(config: ScaffoldConfiguration) -> list[tuple[str, str]]:
        selected: list[tuple[str, str]] = []
        for step_id, field in _SELECTION_FIELDS:
            value = getattr(config, field)
            if isinstance(value, str):
                selected.append((step_id, value))
        selected.extend(("extras", flag) for flag in config.extras.enabled())
        selected.extend(("ai-templates", template) for template in config.ai_templates)
        return selected

    def _on_change(self, previous: ScaffoldConfiguration, current: ScaffoldConfiguration) -> None:
        if self.evaluator.fingerprint(previous) != self.evaluator.fingerprint(current):
            self.evaluator.invalidate()
            if self.evaluator.settings.debug:
                print_info("[OptionProvider] Configuration changed, caches invalidated")

    def _log_failure(self, action: str, exc: Exception) -> None:
        if self.evaluator.settings.debug:
            print_error(f"[OptionProvider] Failed to {action}: {exc}")
