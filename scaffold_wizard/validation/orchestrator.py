"""Gatekeeper for the wizard's "Next" transition.

Combines the step's own field validator with the error-severity
cross-field rules. The field check always runs first so the user sees the
most local problem before any whole-configuration complaint.
"""

from __future__ import annotations

from typing import Optional

from scaffold_wizard.models import ScaffoldConfiguration, ValidationResult
from scaffold_wizard.steps.catalog import StepCatalog, default_catalog
from scaffold_wizard.steps.navigator import StepNavigator
from scaffold_wizard.validation.cross_field import validate_config
from scaffold_wizard.validation.fields import FIELD_VALIDATORS

INVALID_STEP_MESSAGE = "Invalid step"


class ValidationOrchestrator:
    """Validates wizard steps against a step catalog."""

    def __init__(self, catalog: Optional[StepCatalog] = None) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()
        self.navigator = StepNavigator(self.catalog)

    def validate_step(self, step_index: int, config: ScaffoldConfiguration) -> ValidationResult:
        """Validate the step at absolute *step_index* under *config*.

        Returns the field validator's failure if there is one, otherwise the
        first violated (non-skipped) cross-field error. On success the
        result carries the current cross-field warnings.
        """
        step = self.catalog.find(step_index)
        if step is None:
            return ValidationResult.fail(INVALID_STEP_MESSAGE)

        if step.validator is not None and step.field is not None:
            validator = FIELD_VALIDATORS.get(step.validator)
            if validator is None:
                raise KeyError(
                    f'Step "{step.id}" refers to unknown validator "{step.validator}"'
                )
            field_result = validator(config.value_of(step.field), config)
            if not field_result.is_valid:
                return field_result

        report = validate_config(config, apply_skips=True)
        if report.errors:
            return ValidationResult.fail(report.errors[0].message)
        return ValidationResult.ok([issue.message for issue in report.warnings])

    def validate_all_steps(self, config: ScaffoldConfiguration) -> ValidationResult:
        """Validate every currently visible step, numbering them as the user sees them."""
        warnings: list[str] = []
        visible = [
            index for index in range(len(self.catalog))
            if self.navigator.is_visible(index, config)
        ]
        for position, index in enumerate(visible, start=1):
            result = self.validate_step(index, config)
            if not result.is_valid:
                return ValidationResult.fail(f"Step {position}: {result.error}")
            warnings = result.warnings
        return ValidationResult.ok(warnings)
