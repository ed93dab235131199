"""Scaffold Wizard validation -- field checks, cross-field rules and step gating.

Quick usage::

    from scaffold_wizard.validation import ValidationOrchestrator

    orchestrator = ValidationOrchestrator()
    result = orchestrator.validate_step(current_step, config)
    if not result.is_valid:
        show(result.error)
"""

from scaffold_wizard.validation.cross_field import (
    SKIP_CONDITIONS,
    VALIDATION_RULES,
    ConfigValidationReport,
    CrossFieldRule,
    GenerationReadiness,
    Severity,
    ValidationIssue,
    validate_config,
    validate_for_generation,
)
from scaffold_wizard.validation.fields import FIELD_VALIDATORS, get_field_validator
from scaffold_wizard.validation.orchestrator import ValidationOrchestrator

__all__ = [
    "FIELD_VALIDATORS",
    "SKIP_CONDITIONS",
    "VALIDATION_RULES",
    "ConfigValidationReport",
    "CrossFieldRule",
    "GenerationReadiness",
    "Severity",
    "ValidationIssue",
    "ValidationOrchestrator",
    "get_field_validator",
    "validate_config",
    "validate_for_generation",
]
