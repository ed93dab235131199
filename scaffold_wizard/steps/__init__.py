"""Scaffold Wizard steps -- the static catalog and visible-step navigation.

Quick usage::

    from scaffold_wizard.steps import StepNavigator, default_catalog

    navigator = StepNavigator(default_catalog())
    visible = navigator.get_visible_steps(config)
    nxt = navigator.get_next_visible_step_index(current, config)
"""

from scaffold_wizard.steps.catalog import (
    ConditionOperator,
    InvalidStepError,
    StepCatalog,
    StepDescriptor,
    StepKind,
    StepOption,
    VisibilityCondition,
    default_catalog,
)
from scaffold_wizard.steps.navigator import StepNavigator

__all__ = [
    "ConditionOperator",
    "InvalidStepError",
    "StepCatalog",
    "StepDescriptor",
    "StepKind",
    "StepNavigator",
    "StepOption",
    "VisibilityCondition",
    "default_catalog",
]
