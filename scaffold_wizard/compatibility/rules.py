"""Declarative compatibility rules and the registry that holds them.

A rule targets exactly one ``(step, option)`` pair and decides, from the
whole configuration, whether that option must be disabled. Rules declare
the configuration fields they read; the evaluator derives its cache key
from the union of those declarations, so a rule that reads an undeclared
field would be served stale results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from scaffold_wizard.models import ScaffoldConfiguration

if TYPE_CHECKING:
    from scaffold_wizard.steps.catalog import StepCatalog

Predicate = Callable[[ScaffoldConfiguration], bool]
MessageFn = Callable[[ScaffoldConfiguration], str]

DEFAULT_PRIORITY = 100


@dataclass(frozen=True)
class CompatibilityRule:
    """A single ``(step, option)`` compatibility constraint.

    ``priority`` decides which message wins when several rules disable the
    same option: lower numbers win, and equal priorities fall back to
    registration order.
    """

    id: str
    description: str
    target_step: str
    target_option: str
    is_incompatible: Predicate
    get_message: MessageFn
    reads: frozenset[str] = field(default_factory=frozenset)
    conflicting_field: Optional[str] = None
    priority: int = DEFAULT_PRIORITY


class RuleRegistry:
    """Immutable, ordered collection of compatibility rules.

    Matching rules are indexed by ``(step, option)`` once at construction.
    """

    def __init__(self, rules: Iterable[CompatibilityRule]) -> None:
        self._rules: tuple[CompatibilityRule, ...] = tuple(rules)
        index: dict[tuple[str, str], list[CompatibilityRule]] = {}
        seen: set[str] = set()
        for rule in self._rules:
            if rule.id in seen:
                raise ValueError(f"Duplicate compatibility rule id: {rule.id!r}")
            seen.add(rule.id)
            index.setdefault((rule.target_step, rule.target_option), []).append(rule)
        self._by_target = {key: tuple(value) for key, value in index.items()}
        self._fingerprint_fields = tuple(
            sorted({name for rule in self._rules for name in rule.reads})
        )

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    @property
    def rules(self) -> tuple[CompatibilityRule, ...]:
        return self._rules

    @property
    def fingerprint_fields(self) -> tuple[str, ...]:
        """Every configuration field any rule declares it reads, sorted."""
        return self._fingerprint_fields

    def rules_for(self, step_id: str, option: str) -> tuple[CompatibilityRule, ...]:
        """Rules targeting ``(step_id, option)`` in registration order."""
        return self._by_target.get((step_id, option), ())

    def get(self, rule_id: str) -> Optional[CompatibilityRule]:
        return next((rule for rule in self._rules if rule.id == rule_id), None)

    def extended(self, *rules: CompatibilityRule) -> "RuleRegistry":
        """Return a new registry with *rules* appended; this one is unchanged."""
        return RuleRegistry(self._rules + tuple(rules))

    def without(self, *rule_ids: str) -> "RuleRegistry":
        """Return a new registry without the named rules."""
        drop = set(rule_ids)
        return RuleRegistry(rule for rule in self._rules if rule.id not in drop)

    def orphans(self, catalog: "StepCatalog") -> list[CompatibilityRule]:
        """Rules whose target step or option is absent from *catalog*.

        Orphans never match anything the wizard shows, so they are inert.
        """
        orphaned: list[CompatibilityRule] = []
        for rule in self._rules:
            step = catalog.get_by_id(rule.target_step)
            if step is None or not step.has_option(rule.target_option):
                orphaned.append(rule)
        return orphaned


# ---------------------------------------------------------------------------
# Labels and helpers
# ---------------------------------------------------------------------------

OPTION_LABELS: dict[str, str] = {
    # Frontend frameworks
    "nextjs": "Next.js",
    "react": "React",
    "vue": "Vue",
    "angular": "Angular",
    "svelte": "Svelte",
    # Backend frameworks
    "none": "None",
    "nextjs-api": "Next.js API",
    "express": "Express",
    "fastify": "Fastify",
    "nestjs": "NestJS",
    # Databases
    "prisma-postgres": "Prisma + PostgreSQL",
    "drizzle-postgres": "Drizzle + PostgreSQL",
    "supabase": "Supabase",
    "mongodb": "MongoDB",
    # Auth
    "nextauth": "NextAuth",
    "clerk": "Clerk",
    # Project structures
    "nextjs-only": "Next.js Only",
    "react-spa": "React SPA",
    "fullstack-monorepo": "Fullstack Monorepo",
    "express-api-only": "Express API Only",
}

AI_PROVIDERS: tuple[str, ...] = ("anthropic", "openai", "aws-bedrock", "gemini")


def get_option_label(value: Optional[str]) -> str:
    """Human-readable label for a configuration value."""
    if value is None:
        return "nothing"
    return OPTION_LABELS.get(value, value)


def is_ai_template_compatible(config: ScaffoldConfiguration) -> bool:
    """AI templates need a Next.js frontend or a fullstack monorepo."""
    return (
        config.frontend_framework == "nextjs"
        or config.project_structure == "fullstack-monorepo"
    )


def get_compatible_ai_providers(selected_templates: Iterable[str]) -> list[str]:
    """Providers usable with the selected AI templates.

    Every template currently works with every provider; with no templates
    selected there is nothing to choose.
    """
    if not list(selected_templates):
        return []
    return list(AI_PROVIDERS)


# ---------------------------------------------------------------------------
# Built-in rules
# ---------------------------------------------------------------------------

_FRONTEND = frozenset({"frontend_framework"})
_DATABASE = frozenset({"database"})
_BACKEND = frozenset({"backend_framework"})
_AI_LAYOUT = frozenset({"frontend_framework", "project_structure"})


def _separate_backend_rule(option: str, name: str) -> CompatibilityRule:
    return CompatibilityRule(
        id=f"backend-{option}-incompatible-with-nextjs",
        description=f"{name} backend is incompatible with Next.js frontend",
        target_step="backend",
        target_option=option,
        is_incompatible=lambda config: config.frontend_framework == "nextjs",
        get_message=lambda config: (
            f"{name} cannot be used with {get_option_label(config.frontend_framework)}. "
            'Next.js has its own built-in API routes. Use "Next.js API" or select a '
            "different frontend framework."
        ),
        reads=_FRONTEND,
        conflicting_field="frontend_framework",
    )


def _supabase_auth_rule(database: str) -> CompatibilityRule:
    if database == "none":
        suffix, description = "no-database", "Supabase Auth requires Supabase database"
    else:
        suffix = database.split("-")[0]
        description = f"Supabase Auth is incompatible with {get_option_label(database)}"
    return CompatibilityRule(
        id=f"auth-supabase-incompatible-with-{suffix}",
        description=description,
        target_step="auth",
        target_option="supabase",
        is_incompatible=lambda config: config.database == database,
        get_message=lambda config: (
            "Supabase Auth requires Supabase as the database. "
            + (
                "Currently no database is selected. "
                if config.database == "none"
                else f"Currently selected: {get_option_label(config.database)}. "
            )
            + "Change your database to Supabase or select a different authentication provider."
        ),
        reads=_DATABASE,
        conflicting_field="database",
    )


def _ai_template_rule(template: str) -> CompatibilityRule:
    return CompatibilityRule(
        id=f"ai-templates-{template}-require-nextjs-or-monorepo",
        description="AI templates require Next.js frontend or fullstack monorepo structure",
        target_step="ai-templates",
        target_option=template,
        is_incompatible=lambda config: not is_ai_template_compatible(config),
        get_message=lambda config: (
            "AI templates require Next.js as the frontend framework or a fullstack "
            f"monorepo structure. Currently selected: "
            f"{get_option_label(config.frontend_framework)} with "
            f"{get_option_label(config.project_structure)} structure. Change your "
            "frontend to Next.js or select fullstack monorepo structure."
        ),
        reads=_AI_LAYOUT,
        conflicting_field="frontend_framework",
    )


def _build_default_rules() -> list[CompatibilityRule]:
    rules: list[CompatibilityRule] = [
        # Frontend / backend
        _separate_backend_rule("express", "Express"),
        _separate_backend_rule("fastify", "Fastify"),
        _separate_backend_rule("nestjs", "NestJS"),
        CompatibilityRule(
            id="backend-nextjs-api-requires-nextjs-frontend",
            description="Next.js API requires Next.js as the frontend framework",
            target_step="backend",
            target_option="nextjs-api",
            is_incompatible=lambda config: config.frontend_framework != "nextjs",
            get_message=lambda config: (
                "Next.js API routes require Next.js as the frontend framework. "
                f"Currently selected: {get_option_label(config.frontend_framework)}. "
                "Change your frontend to Next.js or select a different backend."
            ),
            reads=_FRONTEND,
            conflicting_field="frontend_framework",
        ),
        # Database / auth
        _supabase_auth_rule("mongodb"),
        _supabase_auth_rule("prisma-postgres"),
        _supabase_auth_rule("drizzle-postgres"),
        _supabase_auth_rule("none"),
        CompatibilityRule(
            id="auth-nextauth-requires-database",
            description="NextAuth requires a database for session storage",
            target_step="auth",
            target_option="nextauth",
            is_incompatible=lambda config: config.database == "none",
            get_message=lambda config: (
                "NextAuth requires a database for session storage. Currently no database "
                "is selected. Select a database (Prisma, Drizzle, or MongoDB) or choose a "
                "different authentication provider."
            ),
            reads=_DATABASE,
            conflicting_field="database",
        ),
        # Extras
        CompatibilityRule(
            id="extras-redis-requires-backend",
            description="Redis requires a backend framework",
            target_step="extras",
            target_option="redis",
            is_incompatible=lambda config: config.backend_framework == "none",
            get_message=lambda config: (
                "Redis requires a backend framework to be useful. Currently no backend is "
                "selected. Select a backend framework (Express, Fastify, NestJS, or "
                "Next.js API) to use Redis."
            ),
            reads=_BACKEND,
            conflicting_field="backend_framework",
        ),
    ]
    # AI templates
    rules.extend(
        _ai_template_rule(template)
        for template in (
            "chatbot",
            "document-analyzer",
            "semantic-search",
            "code-assistant",
            "image-generator",
        )
    )
    return rules


@lru_cache(maxsize=1)
def default_registry() -> RuleRegistry:
    """The built-in rule registry, constructed once per process."""
    return RuleRegistry(_build_default_rules())
