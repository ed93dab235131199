"""Scaffold Wizard -- compatibility rules and conditional step navigation.

The decision core of a project-scaffolding wizard: which options are
selectable given earlier choices, which steps are shown, and whether the
user may move on.

Quick usage::

    from scaffold_wizard import WizardSession

    session = WizardSession()
    session.store.update(project_name="my-app", description="Demo")
    for option in session.options_for_current_step():
        print(option.label, option.is_disabled, option.incompatibility_reason)
"""

from scaffold_wizard.compatibility import (
    CompatibilityEvaluator,
    CompatibilityRule,
    OptionProvider,
    RuleRegistry,
    default_registry,
)
from scaffold_wizard.config import Config
from scaffold_wizard.models import (
    CompatibilityResult,
    Diagnostic,
    DiagnosticKind,
    ExtrasConfig,
    ScaffoldConfiguration,
    ValidationResult,
)
from scaffold_wizard.session import NavigationResult, WizardSession
from scaffold_wizard.steps import InvalidStepError, StepCatalog, StepNavigator, default_catalog
from scaffold_wizard.store import ConfigStore
from scaffold_wizard.validation import ValidationOrchestrator, validate_for_generation

__version__ = "0.1.0"

__all__ = [
    "CompatibilityEvaluator",
    "CompatibilityResult",
    "CompatibilityRule",
    "Config",
    "ConfigStore",
    "Diagnostic",
    "DiagnosticKind",
    "ExtrasConfig",
    "InvalidStepError",
    "NavigationResult",
    "OptionProvider",
    "RuleRegistry",
    "ScaffoldConfiguration",
    "StepCatalog",
    "StepNavigator",
    "ValidationOrchestrator",
    "ValidationResult",
    "WizardSession",
    "default_catalog",
    "default_registry",
    "validate_for_generation",
]
