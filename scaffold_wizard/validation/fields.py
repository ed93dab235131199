"""Field-level validators for individual wizard steps.

Every validator has the signature ``(value, config) -> ValidationResult``.
Most only look at *value*; the AI provider check also needs to know
whether any AI templates were selected. Steps refer to validators by name
through :data:`FIELD_VALIDATORS` so the step catalog stays serialisable.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Callable

from scaffold_wizard.models import (
    AIProvider,
    AITemplate,
    AuthProvider,
    BackendFramework,
    Database,
    ExtrasConfig,
    FrontendFramework,
    NextjsRouter,
    ScaffoldConfiguration,
    Styling,
    ValidationResult,
    enum_values,
)

FieldValidator = Callable[[Any, ScaffoldConfiguration], ValidationResult]

PROJECT_NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200

_PROJECT_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")


def validate_project_name(value: Any, config: ScaffoldConfiguration | None = None) -> ValidationResult:
    """Required, lowercase alphanumerics and single inner hyphens, at most 50 chars."""
    if not isinstance(value, str) or not value.strip():
        return ValidationResult.fail("Project name is required")
    if len(value) > PROJECT_NAME_MAX_LENGTH:
        return ValidationResult.fail(
            f"Project name must be {PROJECT_NAME_MAX_LENGTH} characters or less"
        )
    if not _PROJECT_NAME_PATTERN.match(value):
        return ValidationResult.fail("Use lowercase letters, numbers, and hyphens only")
    if value.startswith("-") or value.endswith("-"):
        return ValidationResult.fail("Project name cannot start or end with a hyphen")
    if "--" in value:
        return ValidationResult.fail("Project name cannot have consecutive hyphens")
    return ValidationResult.ok()


def validate_description(value: Any, config: ScaffoldConfiguration | None = None) -> ValidationResult:
    if not isinstance(value, str) or not value.strip():
        return ValidationResult.fail("Description is required")
    if len(value) > DESCRIPTION_MAX_LENGTH:
        return ValidationResult.fail(
            f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less"
        )
    return ValidationResult.ok()


def choice_validator(enum_cls: type[Enum], message: str) -> FieldValidator:
    """Build a validator that accepts exactly the values of *enum_cls*."""
    allowed = frozenset(enum_values(enum_cls))

    def validate(value: Any, config: ScaffoldConfiguration | None = None) -> ValidationResult:
        if value not in allowed:
            return ValidationResult.fail(message)
        return ValidationResult.ok()

    validate.__name__ = f"validate_{enum_cls.__name__.lower()}"
    return validate


def validate_extras(value: Any, config: ScaffoldConfiguration | None = None) -> ValidationResult:
    if not isinstance(value, ExtrasConfig):
        return ValidationResult.fail("Invalid extras configuration")
    return ValidationResult.ok()


def validate_ai_templates(value: Any, config: ScaffoldConfiguration | None = None) -> ValidationResult:
    """AI templates are optional; any that are chosen must be known templates."""
    if value is None:
        return ValidationResult.ok()
    if not isinstance(value, (list, tuple)):
        return ValidationResult.fail("Invalid AI templates configuration")
    known = set(enum_values(AITemplate))
    for template in value:
        if template not in known:
            return ValidationResult.fail(f"Invalid AI template: {template}")
    return ValidationResult.ok()


def validate_ai_provider(value: Any, config: ScaffoldConfiguration | None = None) -> ValidationResult:
    """A provider is required as soon as at least one AI template is selected."""
    if config is None or not config.ai_templates:
        return ValidationResult.ok()
    if not value:
        return ValidationResult.fail("Please select an AI provider for your templates")
    if value not in enum_values(AIProvider):
        return ValidationResult.fail(f"Invalid AI provider: {value}")
    return ValidationResult.ok()


FIELD_VALIDATORS: dict[str, FieldValidator] = {
    "project_name": validate_project_name,
    "description": validate_description,
    "frontend_framework": choice_validator(FrontendFramework, "Please select a frontend framework"),
    "nextjs_router": choice_validator(NextjsRouter, "Please select a Next.js router"),
    "backend_framework": choice_validator(BackendFramework, "Please select a backend option"),
    "database": choice_validator(Database, "Please select a database option"),
    "auth": choice_validator(AuthProvider, "Please select an authentication option"),
    "styling": choice_validator(Styling, "Please select a styling option"),
    "extras": validate_extras,
    "ai_templates": validate_ai_templates,
    "ai_provider": validate_ai_provider,
}


def get_field_validator(name: str) -> FieldValidator:
    """Look up a validator by name; raises ``KeyError`` for unknown names."""
    return FIELD_VALIDATORS[name]
