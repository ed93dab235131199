"""Wizard session -- wires the store, engine, navigator and validators.

A session is what a rendering layer drives: it exposes the current step,
the annotated options to show for it, and ``next()``/``back()`` transitions
that respect validation and step visibility.

Usage::

    from scaffold_wizard.session import WizardSession

    session = WizardSession()
    session.store.update(project_name="my-app")
    outcome = session.next()
    if not outcome.advanced:
        show(outcome.error)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from scaffold_wizard.compatibility.evaluator import CompatibilityEvaluator
from scaffold_wizard.compatibility.options import OptionProvider, OptionWithCompatibility
from scaffold_wizard.compatibility.rules import RuleRegistry
from scaffold_wizard.config import Config
from scaffold_wizard.models import ScaffoldConfiguration
from scaffold_wizard.steps.catalog import InvalidStepError, StepCatalog, StepDescriptor, default_catalog
from scaffold_wizard.steps.navigator import StepNavigator
from scaffold_wizard.store import ConfigStore
from scaffold_wizard.utils import describe_value, print_summary_table
from scaffold_wizard.validation.cross_field import GenerationReadiness, validate_for_generation
from scaffold_wizard.validation.orchestrator import ValidationOrchestrator


class NavigationResult(BaseModel):
    """Outcome of a ``next()``/``back()`` request."""

    advanced: bool
    step_index: int
    error: Optional[str] = None
    finished: bool = False


class WizardSession:
    """One user's pass through the wizard."""

    def __init__(
        self,
        store: Optional[ConfigStore] = None,
        catalog: Optional[StepCatalog] = None,
        registry: Optional[RuleRegistry] = None,
        settings: Optional[Config] = None,
    ) -> None:
        self.settings = settings or Config()
        self.store = store if store is not None else ConfigStore()
        self.catalog = catalog if catalog is not None else default_catalog()
        self.evaluator = CompatibilityEvaluator(registry=registry, settings=self.settings)
        self.navigator = StepNavigator(self.catalog)
        self.orchestrator = ValidationOrchestrator(self.catalog)
        self.options = OptionProvider(self.evaluator, self.store)
        self._current = self.navigator.get_next_visible_step_index(-1, self.config) or 0
        self._completed: set[int] = set()

    # -- State -------------------------------------------------------------

    @property
    def config(self) -> ScaffoldConfiguration:
        return self.store.snapshot

    @property
    def current_step(self) -> int:
        """Absolute index of the step being shown.

        If a configuration change has hidden the step, the session falls
        back to the nearest earlier visible step.
        """
        if not self.navigator.is_visible(self._current, self.config):
            previous = self.navigator.get_previous_visible_step_index(self._current, self.config)
            if previous is None:
                previous = self.navigator.get_next_visible_step_index(self._current, self.config)
            if previous is not None:
                self._current = previous
        return self._current

    @property
    def current_descriptor(self) -> StepDescriptor:
        return self.catalog.get(self.current_step)

    @property
    def completed_steps(self) -> frozenset[int]:
        return frozenset(self._completed)

    def is_step_complete(self, index: int) -> bool:
        return index in self._completed

    def visible_steps(self) -> list[StepDescriptor]:
        return self.navigator.get_visible_steps(self.config)

    def progress(self) -> tuple[int, int]:
        """``(position, total)`` counted over visible steps, position 1-based."""
        rank = self.navigator.get_visible_step_index(self.current_step, self.config)
        total = self.navigator.count_visible(self.config)
        return (rank + 1 if rank is not None else 0, total)

    @property
    def can_go_back(self) -> bool:
        return self.navigator.get_previous_visible_step_index(self.current_step, self.config) is not None

    @property
    def is_last_step(self) -> bool:
        return self.navigator.get_next_visible_step_index(self.current_step, self.config) is None

    def options_for_current_step(self) -> list[OptionWithCompatibility]:
        step = self.current_descriptor
        return self.options.get_compatible_options(step.id, step.options)

    # -- Transitions -------------------------------------------------------

    def next(self) -> NavigationResult:
        """Validate the current step and move to the next visible one."""
        current = self.current_step
        result = self.orchestrator.validate_step(current, self.config)
        if not result.is_valid:
            return NavigationResult(advanced=False, step_index=current, error=result.error)

        self._completed.add(current)
        target = self.navigator.get_next_visible_step_index(current, self.config)
        if target is None:
            return NavigationResult(advanced=False, step_index=current, finished=True)
        self._current = target
        return NavigationResult(advanced=True, step_index=target)

    def back(self) -> NavigationResult:
        """Move to the previous visible step; never validates."""
        current = self.current_step
        target = self.navigator.get_previous_visible_step_index(current, self.config)
        if target is None:
            return NavigationResult(advanced=False, step_index=current)
        self._current = target
        return NavigationResult(advanced=True, step_index=target)

    def go_to(self, index: int) -> StepDescriptor:
        """Jump to absolute *index*.

        Raises:
            InvalidStepError: If the step does not exist or is currently hidden.
        """
        step = self.catalog.get(index)
        if not step.is_visible(self.config):
            raise InvalidStepError(f'Step "{step.id}" is hidden for the current configuration')
        self._current = index
        return step

    def reset(self) -> None:
        """Start over: initial configuration, first visible step, nothing completed."""
        self.store.reset()
        self._current = self.navigator.get_next_visible_step_index(-1, self.config) or 0
        self._completed.clear()

    # -- Final checks ------------------------------------------------------

    def readiness(self) -> GenerationReadiness:
        return validate_for_generation(self.config)

    def can_generate(self) -> bool:
        """All visible steps valid, no blocking rule and no disabled selection."""
        return (
            self.orchestrator.validate_all_steps(self.config).is_valid
            and self.readiness().can_generate
            and not self.options.has_incompatibilities()
        )

    def summary(self) -> dict[str, str]:
        """Step title -> chosen value for every visible step that edits a field."""
        config = self.config
        rows: dict[str, str] = {}
        for step in self.visible_steps():
            if step.field is None:
                continue
            value = config.value_of(step.field)
            if step.field == "extras":
                value = config.extras.enabled()
            rows[step.title] = describe_value(value)
        return rows

    def print_summary(self) -> None:
        """Developer aid: dump the current choices as a table."""
        print_summary_table(self.summary(), title="Wizard configuration")

    def close(self) -> None:
        self.options.close()
