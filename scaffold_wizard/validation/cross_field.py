"""Whole-configuration consistency rules.

These are coarser than the per-option compatibility rules: each one looks
at the configuration as a whole and either blocks progress (``error``) or
merely advises (``warning``). A handful of error rules depend on fields the
user may not have reached yet; :data:`SKIP_CONDITIONS` lists, rule by rule,
when such a rule is held back so it cannot block earlier steps.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field

from scaffold_wizard.compatibility.rules import is_ai_template_compatible
from scaffold_wizard.models import ScaffoldConfiguration

Check = Callable[[ScaffoldConfiguration], bool]


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class CrossFieldRule:
    """A whole-configuration check; ``check`` returns True when violated."""

    id: str
    message: str
    severity: Severity
    check: Check
    field: str = "general"


class ValidationIssue(BaseModel):
    """A violated cross-field rule."""

    rule_id: str
    field: str
    message: str
    severity: Severity


class ConfigValidationReport(BaseModel):
    """All violated cross-field rules for one configuration."""

    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def messages_for(self, field: str) -> list[ValidationIssue]:
        return [issue for issue in self.errors + self.warnings if issue.field == field]


class GenerationReadiness(BaseModel):
    """Whether project generation may proceed, with a one-line summary."""

    can_generate: bool
    message: str
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)


_PROJECT_NAME_PATTERN = re.compile(r"[a-z0-9-]+")


def _invalid_project_name(config: ScaffoldConfiguration) -> bool:
    return not _PROJECT_NAME_PATTERN.fullmatch(config.project_name or "")


VALIDATION_RULES: tuple[CrossFieldRule, ...] = (
    # Framework compatibility
    CrossFieldRule(
        id="nextjs-api-requires-nextjs",
        message="Next.js API routes require Next.js as the frontend framework.",
        severity=Severity.ERROR,
        check=lambda c: c.backend_framework == "nextjs-api" and c.frontend_framework != "nextjs",
        field="backend_framework",
    ),
    CrossFieldRule(
        id="nextjs-only-structure",
        message="Next.js only structure requires Next.js as frontend framework.",
        severity=Severity.ERROR,
        check=lambda c: c.project_structure == "nextjs-only" and c.frontend_framework != "nextjs",
        field="project_structure",
    ),
    CrossFieldRule(
        id="express-api-only-no-frontend",
        message="Express API only structure will not include frontend code.",
        severity=Severity.WARNING,
        check=lambda c: c.project_structure == "express-api-only",
        field="project_structure",
    ),
    CrossFieldRule(
        id="react-spa-no-backend",
        message=(
            "React SPA structure will not include backend code. "
            "Consider Full-stack monorepo if you need a backend."
        ),
        severity=Severity.WARNING,
        check=lambda c: (
            c.project_structure == "react-spa"
            and c.backend_framework is not None
            and c.backend_framework != "none"
        ),
        field="project_structure",
    ),
    CrossFieldRule(
        id="webpack-svelte-warning",
        message=(
            "Vite is recommended for Svelte projects for better performance "
            "and developer experience."
        ),
        severity=Severity.WARNING,
        check=lambda c: c.build_tool == "webpack" and c.frontend_framework == "svelte",
        field="build_tool",
    ),
    # Authentication and database
    CrossFieldRule(
        id="auth-database",
        message="Authentication requires a database. Please select a database option.",
        severity=Severity.ERROR,
        check=lambda c: c.auth not in (None, "none") and c.database == "none",
        field="auth",
    ),
    # Deployment
    CrossFieldRule(
        id="vercel-express",
        message="Standalone Express apps cannot deploy to Vercel. Consider Render or Railway.",
        severity=Severity.ERROR,
        check=lambda c: c.project_structure == "express-api-only" and "vercel" in c.deployment,
        field="deployment",
    ),
    # API and architecture
    CrossFieldRule(
        id="trpc-monorepo",
        message=(
            "tRPC works best with monorepo or Next.js. "
            "Consider using REST for standalone Express."
        ),
        severity=Severity.WARNING,
        check=lambda c: c.api == "trpc" and c.project_structure == "express-api-only",
        field="api",
    ),
    CrossFieldRule(
        id="ai-framework-compatibility",
        message=(
            "AI templates require a Next.js frontend or a fullstack monorepo structure. "
            "Please select Next.js to use AI features."
        ),
        severity=Severity.ERROR,
        check=lambda c: bool(c.ai_templates) and not is_ai_template_compatible(c),
        field="ai_templates",
    ),
    CrossFieldRule(
        id="ai-api-key",
        message=(
            "AI templates require an API key from your chosen AI provider. "
            "You'll need to add it to your environment after generation."
        ),
        severity=Severity.WARNING,
        check=lambda c: bool(c.ai_templates),
        field="ai_templates",
    ),
    CrossFieldRule(
        id="supabase-auth-db",
        message=(
            "When using Supabase auth, Supabase database is recommended "
            "for seamless integration."
        ),
        severity=Severity.WARNING,
        check=lambda c: c.auth == "supabase" and c.database != "supabase",
        field="auth",
    ),
    CrossFieldRule(
        id="nextjs-router-required",
        message="Next.js framework requires a router selection (App Router or Pages Router).",
        severity=Severity.ERROR,
        check=lambda c: c.frontend_framework == "nextjs" and not c.nextjs_router,
        field="nextjs_router",
    ),
    CrossFieldRule(
        id="project-name-required",
        message="Project name is required and must be valid.",
        severity=Severity.ERROR,
        check=_invalid_project_name,
        field="project_name",
    ),
    CrossFieldRule(
        id="description-required",
        message="Project description is required.",
        severity=Severity.ERROR,
        check=lambda c: not c.description,
        field="description",
    ),
    CrossFieldRule(
        id="graphql-complexity",
        message=(
            "GraphQL setup requires additional configuration. "
            "Ensure you understand the setup requirements."
        ),
        severity=Severity.WARNING,
        check=lambda c: c.api == "graphql",
        field="api",
    ),
    CrossFieldRule(
        id="mongodb-auth-compatibility",
        message=(
            "MongoDB works best with Clerk or custom auth. NextAuth with MongoDB "
            "requires additional adapter configuration."
        ),
        severity=Severity.WARNING,
        check=lambda c: c.database == "mongodb" and c.auth == "nextauth",
        field="database",
    ),
    CrossFieldRule(
        id="docker-deployment-recommendation",
        message="Docker is recommended when deploying to Railway for consistent environments.",
        severity=Severity.WARNING,
        check=lambda c: "railway" in c.deployment and not c.extras.docker,
        field="extras",
    ),
)


def _frontend_unset(config: ScaffoldConfiguration) -> bool:
    return config.frontend_framework is None


def _auth_or_database_unset(config: ScaffoldConfiguration) -> bool:
    return config.auth is None or config.database is None


def _project_name_unset(config: ScaffoldConfiguration) -> bool:
    return config.project_name == ""


def _description_unset(config: ScaffoldConfiguration) -> bool:
    return config.description == ""


# (rule id, skip condition): while the condition holds, step validation
# does not run the rule. Text fields are unset while empty.
SKIP_CONDITIONS: tuple[tuple[str, Check], ...] = (
    ("nextjs-router-required", _frontend_unset),
    ("nextjs-api-requires-nextjs", _frontend_unset),
    ("nextjs-only-structure", _frontend_unset),
    ("ai-framework-compatibility", _frontend_unset),
    ("auth-database", _auth_or_database_unset),
    ("project-name-required", _project_name_unset),
    ("description-required", _description_unset),
)


def is_skipped(rule: CrossFieldRule, config: ScaffoldConfiguration) -> bool:
    """True when *rule* is held back for *config* by :data:`SKIP_CONDITIONS`."""
    return any(rule_id == rule.id and skip(config) for rule_id, skip in SKIP_CONDITIONS)


def get_rule_by_id(rule_id: str) -> Optional[CrossFieldRule]:
    return next((rule for rule in VALIDATION_RULES if rule.id == rule_id), None)


def get_rules_by_severity(severity: Severity) -> list[CrossFieldRule]:
    return [rule for rule in VALIDATION_RULES if rule.severity is severity]


def _issue(rule: CrossFieldRule) -> ValidationIssue:
    return ValidationIssue(
        rule_id=rule.id, field=rule.field, message=rule.message, severity=rule.severity
    )


def validate_config(
    config: ScaffoldConfiguration, apply_skips: bool = False
) -> ConfigValidationReport:
    """Run every cross-field rule against *config*.

    Args:
        config: Configuration snapshot to check.
        apply_skips: Honour :data:`SKIP_CONDITIONS` (used while the wizard is
            still in progress). A final check before generation leaves this off.
    """
    report = ConfigValidationReport()
    for rule in VALIDATION_RULES:
        if apply_skips and is_skipped(rule, config):
            continue
        if not rule.check(config):
            continue
        if rule.severity is Severity.ERROR:
            report.errors.append(_issue(rule))
        else:
            report.warnings.append(_issue(rule))
    return report


def validate_for_generation(config: ScaffoldConfiguration) -> GenerationReadiness:
    """Decide whether generation can proceed; warnings never block it."""
    report = validate_config(config)
    if report.errors:
        count = len(report.errors)
        message = f"Cannot generate: {count} error{'s' if count > 1 else ''} must be fixed"
    elif report.warnings:
        count = len(report.warnings)
        message = f"{count} warning{'s' if count > 1 else ''} - generation can proceed"
    else:
        message = "Configuration is valid"
    return GenerationReadiness(
        can_generate=not report.errors,
        message=message,
        errors=report.errors,
        warnings=report.warnings,
    )
