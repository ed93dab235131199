"""Pydantic v2 models for the Scaffold Wizard.

Defines the configuration snapshot the wizard accumulates, the option
enumerations each selection step offers, and the immutable result types
returned by the compatibility engine and the validators.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Option enumerations
# ---------------------------------------------------------------------------

class FrontendFramework(str, Enum):
    """Frontend frameworks offered by the wizard."""
    NEXTJS = "nextjs"
    REACT = "react"
    VUE = "vue"
    ANGULAR = "angular"
    SVELTE = "svelte"


class BackendFramework(str, Enum):
    """Backend frameworks. ``none`` means a frontend-only project."""
    NONE = "none"
    NEXTJS_API = "nextjs-api"
    EXPRESS = "express"
    FASTIFY = "fastify"
    NESTJS = "nestjs"


class Database(str, Enum):
    """Database and ORM combinations."""
    NONE = "none"
    PRISMA_POSTGRES = "prisma-postgres"
    DRIZZLE_POSTGRES = "drizzle-postgres"
    SUPABASE = "supabase"
    MONGODB = "mongodb"


class AuthProvider(str, Enum):
    """Authentication providers."""
    NONE = "none"
    NEXTAUTH = "nextauth"
    SUPABASE = "supabase"
    CLERK = "clerk"


class Styling(str, Enum):
    """Styling approaches."""
    TAILWIND = "tailwind"
    CSS_MODULES = "css-modules"
    STYLED_COMPONENTS = "styled-components"


class ProjectStructure(str, Enum):
    """Repository layouts derived from the framework pair."""
    NEXTJS_ONLY = "nextjs-only"
    REACT_SPA = "react-spa"
    FULLSTACK_MONOREPO = "fullstack-monorepo"
    EXPRESS_API_ONLY = "express-api-only"


class BuildTool(str, Enum):
    AUTO = "auto"
    VITE = "vite"
    WEBPACK = "webpack"


class NextjsRouter(str, Enum):
    APP = "app"
    PAGES = "pages"


class ApiLayer(str, Enum):
    REST_FETCH = "rest-fetch"
    REST_AXIOS = "rest-axios"
    TRPC = "trpc"
    GRAPHQL = "graphql"


class DeploymentTarget(str, Enum):
    VERCEL = "vercel"
    RAILWAY = "railway"
    RENDER = "render"


class AITemplate(str, Enum):
    """Optional AI feature templates."""
    CHATBOT = "chatbot"
    DOCUMENT_ANALYZER = "document-analyzer"
    SEMANTIC_SEARCH = "semantic-search"
    CODE_ASSISTANT = "code-assistant"
    IMAGE_GENERATOR = "image-generator"


class AIProvider(str, Enum):
    """Model providers the AI templates can be wired to."""
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    AWS_BEDROCK = "aws-bedrock"
    GEMINI = "gemini"


def enum_values(enum_cls: type[Enum]) -> tuple[str, ...]:
    """Return the raw string values of a ``str`` enum, in declaration order."""
    return tuple(member.value for member in enum_cls)


# ---------------------------------------------------------------------------
# Configuration snapshot
# ---------------------------------------------------------------------------

class ExtrasConfig(BaseModel):
    """Tooling extras, each a simple on/off flag."""
    model_config = ConfigDict(frozen=True)

    docker: bool = Field(default=False, description="Containerization")
    github_actions: bool = Field(default=False, description="CI/CD workflows")
    redis: bool = Field(default=False, description="In-memory data store")
    prettier: bool = Field(default=True, description="Code formatter")
    husky: bool = Field(default=False, description="Git hooks")

    def enabled(self) -> list[str]:
        """Names of the flags that are switched on, in declaration order."""
        return [name for name in type(self).model_fields if getattr(self, name)]


class ScaffoldConfiguration(BaseModel):
    """Everything the user has chosen so far.

    A frozen snapshot: the wizard core never mutates it. Selection fields
    the user has not reached yet hold ``None`` (the unset sentinel). Values
    are plain strings rather than enum members so that a stale or corrupt
    selection can still be represented and then rejected by validation.
    """
    model_config = ConfigDict(frozen=True)

    project_name: str = Field(default="", description="Package/directory name")
    description: str = Field(default="", description="Short project description")

    frontend_framework: Optional[str] = Field(default=None)
    backend_framework: Optional[str] = Field(default=None)
    build_tool: str = Field(default=BuildTool.AUTO.value)
    project_structure: Optional[str] = Field(default=None)
    nextjs_router: Optional[str] = Field(default=NextjsRouter.APP.value)

    auth: Optional[str] = Field(default=None)
    database: Optional[str] = Field(default=None)
    api: str = Field(default=ApiLayer.REST_FETCH.value)

    styling: Optional[str] = Field(default=None)
    shadcn: bool = Field(default=True)
    color_scheme: str = Field(default="purple")

    deployment: list[str] = Field(default_factory=list)

    ai_templates: list[str] = Field(default_factory=list)
    ai_provider: Optional[str] = Field(default=None)

    extras: ExtrasConfig = Field(default_factory=ExtrasConfig)

    def with_changes(self, **changes: Any) -> "ScaffoldConfiguration":
        """Return a new, validated snapshot with *changes* applied."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)

    def value_of(self, field: str) -> Any:
        """Look up a field by name; raises ``KeyError`` for unknown fields."""
        if field not in type(self).model_fields:
            raise KeyError(field)
        return getattr(self, field)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

class CompatibilityResult(BaseModel):
    """Verdict for one option under one configuration. Safe to cache and share."""
    model_config = ConfigDict(frozen=True)

    is_compatible: bool = Field(..., description="Whether the option may be selected")
    reason: Optional[str] = Field(default=None, description="Why the option is disabled")
    conflicting_field: Optional[str] = Field(
        default=None, description="Configuration field that causes the conflict"
    )
    conflicting_value: Optional[str] = Field(
        default=None, description="Current value of the conflicting field"
    )

    @classmethod
    def compatible(cls) -> "CompatibilityResult":
        return _COMPATIBLE


_COMPATIBLE = CompatibilityResult(is_compatible=True)


class ValidationResult(BaseModel):
    """Outcome of validating a field or a whole step."""
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    error: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, warnings: Optional[list[str]] = None) -> "ValidationResult":
        return cls(is_valid=True, warnings=warnings or [])

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(is_valid=False, error=error)


class DiagnosticKind(str, Enum):
    """Categories of developer-facing diagnostics."""
    PREDICATE_FAULT = "predicate_fault"
    MESSAGE_FAULT = "message_fault"
    EMPTY_MESSAGE = "empty_message"
    EVALUATION_FAULT = "evaluation_fault"
    SLOW_EVALUATION = "slow_evaluation"
    SLOW_BATCH = "slow_batch"


class Diagnostic(BaseModel):
    """Structured record of a swallowed failure or a slow evaluation."""
    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    step_id: str
    option: Optional[str] = None
    rule_id: Optional[str] = None
    detail: str = ""
    error_type: Optional[str] = None
    elapsed_ms: Optional[float] = None

    def render(self) -> str:
        """One-line human-readable form for the developer console."""
        target = f'step "{self.step_id}"'
        if self.option is not None:
            target += f', option "{self.option}"'
        head = f"[Compatibility] {self.kind.value} for {target}"
        if self.rule_id:
            head += f' (rule "{self.rule_id}")'
        if self.detail:
            head += f": {self.detail}"
        return head
