"""Scaffold Wizard compatibility engine.

Decides which options the wizard may offer given what the user has already
chosen, caching verdicts per configuration fingerprint and failing open
when a rule misbehaves.

Quick usage::

    from scaffold_wizard.compatibility import CompatibilityEvaluator

    evaluator = CompatibilityEvaluator()
    result = evaluator.evaluate("backend", "express", config)
    if not result.is_compatible:
        print(result.reason)
"""

from scaffold_wizard.compatibility.evaluator import (
    FALLBACK_INCOMPATIBILITY_MESSAGE,
    CompatibilityEvaluator,
    EvaluationMetrics,
    RuleOutcome,
)
from scaffold_wizard.compatibility.options import OptionProvider, OptionWithCompatibility
from scaffold_wizard.compatibility.rules import (
    CompatibilityRule,
    RuleRegistry,
    default_registry,
    get_compatible_ai_providers,
    get_option_label,
    is_ai_template_compatible,
)

__all__ = [
    "FALLBACK_INCOMPATIBILITY_MESSAGE",
    "CompatibilityEvaluator",
    "CompatibilityRule",
    "EvaluationMetrics",
    "OptionProvider",
    "OptionWithCompatibility",
    "RuleOutcome",
    "RuleRegistry",
    "default_registry",
    "get_compatible_ai_providers",
    "get_option_label",
    "is_ai_template_compatible",
]
