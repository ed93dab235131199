"""The ordered, static list of wizard steps.

Each step is pure data: the configuration field it edits, the options it
offers, a declarative visibility condition and the *name* of its field
validator. Keeping every piece declarative means the catalog can be dumped
to YAML, reviewed, and loaded back without losing behaviour.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any, Iterator, Optional, Sequence

import yaml
from pydantic import BaseModel, ConfigDict, Field

from scaffold_wizard.models import ScaffoldConfiguration


class InvalidStepError(IndexError):
    """Raised when a caller refers to a step that does not exist or is hidden."""


# ---------------------------------------------------------------------------
# Step building blocks
# ---------------------------------------------------------------------------

class StepKind(str, Enum):
    """Which kind of input the rendering layer should show."""
    TEXT = "text"
    SINGLE_SELECT = "single-select"
    MULTI_SELECT = "multi-select"
    CUSTOM = "custom"


class StepOption(BaseModel):
    """A selectable option within a step."""
    model_config = ConfigDict(frozen=True)

    value: str = Field(..., description="Value stored in the configuration")
    label: str = Field(..., description="Human-readable label")
    description: str = Field(default="")
    features: list[str] = Field(default_factory=list)
    generated_files: list[str] = Field(default_factory=list)


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    ONE_OF = "one_of"
    NOT_EMPTY = "not_empty"
    EMPTY = "empty"


class VisibilityCondition(BaseModel):
    """Pure predicate over a configuration snapshot.

    Reads exactly one field and never captures state, so the same snapshot
    always yields the same answer.
    """
    model_config = ConfigDict(frozen=True)

    field: str
    operator: ConditionOperator = ConditionOperator.EQUALS
    value: Any = None

    def matches(self, config: ScaffoldConfiguration) -> bool:
        current = config.value_of(self.field)
        if self.operator is ConditionOperator.EQUALS:
            return current == self.value
        if self.operator is ConditionOperator.NOT_EQUALS:
            return current != self.value
        if self.operator is ConditionOperator.ONE_OF:
            return current in (self.value or ())
        if self.operator is ConditionOperator.NOT_EMPTY:
            return bool(current)
        return not current


class StepDescriptor(BaseModel):
    """Configuration for a single wizard step."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    subtitle: str = ""
    kind: StepKind
    field: Optional[str] = Field(
        default=None, description="Configuration field this step edits (None for review steps)"
    )
    options: list[StepOption] = Field(default_factory=list)
    visible_when: Optional[VisibilityCondition] = None
    validator: Optional[str] = Field(
        default=None, description="Name of the field validator to run for this step"
    )
    placeholder: str = ""

    def is_visible(self, config: ScaffoldConfiguration) -> bool:
        return self.visible_when is None or self.visible_when.matches(config)

    def option_values(self) -> list[str]:
        return [option.value for option in self.options]

    def has_option(self, value: str) -> bool:
        return any(option.value == value for option in self.options)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class StepCatalog:
    """Immutable, ordered collection of step descriptors.

    Absolute indices run ``0..len(catalog) - 1`` and never change for a
    given catalog instance.
    """

    def __init__(self, steps: Sequence[StepDescriptor]) -> None:
        self._steps: tuple[StepDescriptor, ...] = tuple(steps)
        self._index: dict[str, int] = {}
        for position, step in enumerate(self._steps):
            if step.id in self._index:
                raise ValueError(f"Duplicate step id: {step.id!r}")
            self._index[step.id] = position

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[StepDescriptor]:
        return iter(self._steps)

    @property
    def steps(self) -> tuple[StepDescriptor, ...]:
        return self._steps

    def find(self, index: int) -> Optional[StepDescriptor]:
        """Return the step at an absolute index, or ``None`` when out of range."""
        if 0 <= index < len(self._steps):
            return self._steps[index]
        return None

    def get(self, index: int) -> StepDescriptor:
        """Return the step at an absolute index.

        Raises:
            InvalidStepError: If *index* is outside the catalog.
        """
        step = self.find(index)
        if step is None:
            raise InvalidStepError(
                f"Step index {index} is outside the catalog (0..{len(self._steps) - 1})"
            )
        return step

    def get_by_id(self, step_id: str) -> Optional[StepDescriptor]:
        position = self._index.get(step_id)
        return None if position is None else self._steps[position]

    def index_of(self, step_id: str) -> Optional[int]:
        return self._index.get(step_id)

    # -- Serialisation -----------------------------------------------------

    def to_yaml(self) -> str:
        """Dump the catalog as a YAML document (a list of steps)."""
        payload = [
            step.model_dump(mode="json", exclude_defaults=True) for step in self._steps
        ]
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)

    @classmethod
    def from_yaml(cls, text: str) -> "StepCatalog":
        """Build a catalog from a YAML document produced by :meth:`to_yaml`."""
        raw = yaml.safe_load(text) or []
        if not isinstance(raw, list):
            raise ValueError("Step catalog YAML must contain a top-level list")
        return cls([StepDescriptor.model_validate(item) for item in raw])


# ---------------------------------------------------------------------------
# Default catalog
# ---------------------------------------------------------------------------

def _opt(value: str, label: str, description: str = "", **extra: Any) -> StepOption:
    return StepOption(value=value, label=label, description=description, **extra)


_AI_TEMPLATE_OPTIONS = [
    _opt(
        "chatbot", "AI Chatbot", "Conversational AI with streaming responses",
        features=["Real-time streaming responses", "Conversation history",
                  "Markdown rendering", "Copy code blocks"],
        generated_files=["src/app/api/chat/route.ts", "src/app/chat/page.tsx"],
    ),
    _opt(
        "document-analyzer", "Document Analyzer", "Upload and analyze documents with AI",
        features=["File upload support", "Text extraction",
                  "AI-powered analysis", "Summary generation"],
        generated_files=["src/app/api/analyze/route.ts", "src/app/analyze/page.tsx"],
    ),
    _opt(
        "semantic-search", "Semantic Search", "AI-powered search with embeddings",
        features=["Vector embeddings", "Semantic similarity",
                  "Intelligent ranking", "Context-aware results"],
        generated_files=["src/app/api/search/route.ts", "src/app/search/page.tsx"],
    ),
    _opt(
        "code-assistant", "Code Assistant", "AI-powered code generation and explanation",
        features=["Code generation", "Code explanation",
                  "Syntax highlighting", "Multiple languages"],
        generated_files=["src/app/api/code-assistant/route.ts",
                         "src/app/code-assistant/page.tsx"],
    ),
    _opt(
        "image-generator", "Image Generator", "Generate images from text descriptions",
        features=["Text-to-image generation", "Style customization",
                  "Image preview", "Download support"],
        generated_files=["src/app/api/generate-image/route.ts",
                         "src/app/generate-image/page.tsx"],
    ),
]


def _build_default_steps() -> list[StepDescriptor]:
    return [
        StepDescriptor(
            id="project-name",
            title="Name your project",
            subtitle="Lowercase letters, numbers and hyphens",
            kind=StepKind.TEXT,
            field="project_name",
            validator="project_name",
            placeholder="my-project",
        ),
        StepDescriptor(
            id="description",
            title="Describe your project",
            subtitle="What will it do?",
            kind=StepKind.TEXT,
            field="description",
            validator="description",
            placeholder="A magical app...",
        ),
        StepDescriptor(
            id="frontend",
            title="Frontend framework",
            kind=StepKind.SINGLE_SELECT,
            field="frontend_framework",
            validator="frontend_framework",
            options=[
                _opt("nextjs", "Next.js", "React framework with SSR and routing"),
                _opt("react", "React", "Popular UI library"),
                _opt("vue", "Vue", "Progressive JavaScript framework"),
                _opt("angular", "Angular", "Full-featured framework"),
                _opt("svelte", "Svelte", "Compile-time framework"),
            ],
        ),
        StepDescriptor(
            id="nextjs-router",
            title="Next.js router",
            subtitle="App Router or Pages Router",
            kind=StepKind.SINGLE_SELECT,
            field="nextjs_router",
            validator="nextjs_router",
            options=[
                _opt("app", "App Router", "Server components and nested layouts"),
                _opt("pages", "Pages Router", "File-based routing under pages/"),
            ],
            visible_when=VisibilityCondition(field="frontend_framework", value="nextjs"),
        ),
        StepDescriptor(
            id="backend",
            title="Backend framework",
            kind=StepKind.SINGLE_SELECT,
            field="backend_framework",
            validator="backend_framework",
            options=[
                _opt("none", "None", "Frontend only"),
                _opt("nextjs-api", "Next.js API", "Built-in API routes"),
                _opt("express", "Express", "Minimal Node.js framework"),
                _opt("fastify", "Fastify", "Fast and low overhead"),
                _opt("nestjs", "NestJS", "Progressive Node.js framework"),
            ],
        ),
        StepDescriptor(
            id="database",
            title="Database",
            kind=StepKind.SINGLE_SELECT,
            field="database",
            validator="database",
            options=[
                _opt("none", "None", "No database"),
                _opt("prisma-postgres", "Prisma + PostgreSQL", "Type-safe ORM with PostgreSQL"),
                _opt("drizzle-postgres", "Drizzle + PostgreSQL", "Lightweight ORM with PostgreSQL"),
                _opt("supabase", "Supabase", "Open source Firebase alternative"),
                _opt("mongodb", "MongoDB", "NoSQL document database"),
            ],
        ),
        StepDescriptor(
            id="auth",
            title="Authentication",
            kind=StepKind.SINGLE_SELECT,
            field="auth",
            validator="auth",
            options=[
                _opt("none", "None", "No authentication"),
                _opt("nextauth", "NextAuth", "Authentication for Next.js"),
                _opt("supabase", "Supabase Auth", "Built-in Supabase authentication"),
                _opt("clerk", "Clerk", "Complete user management"),
            ],
        ),
        StepDescriptor(
            id="styling",
            title="Styling",
            kind=StepKind.SINGLE_SELECT,
            field="styling",
            validator="styling",
            options=[
                _opt("tailwind", "Tailwind CSS", "Utility-first CSS framework"),
                _opt("css-modules", "CSS Modules", "Scoped CSS files"),
                _opt("styled-components", "Styled Components", "CSS-in-JS library"),
            ],
        ),
        StepDescriptor(
            id="extras",
            title="Extras",
            subtitle="Add the finishing touches",
            kind=StepKind.MULTI_SELECT,
            field="extras",
            validator="extras",
            options=[
                _opt("docker", "Docker", "Containerization"),
                _opt("github_actions", "GitHub Actions", "CI/CD workflows"),
                _opt("redis", "Redis", "In-memory data store"),
                _opt("prettier", "Prettier", "Code formatter"),
                _opt("husky", "Husky", "Git hooks"),
            ],
        ),
        StepDescriptor(
            id="ai-templates",
            title="AI features",
            subtitle="Optional AI-powered templates",
            kind=StepKind.MULTI_SELECT,
            field="ai_templates",
            validator="ai_templates",
            options=list(_AI_TEMPLATE_OPTIONS),
        ),
        StepDescriptor(
            id="ai-provider",
            title="AI provider",
            subtitle="Which model provider powers your templates",
            kind=StepKind.SINGLE_SELECT,
            field="ai_provider",
            validator="ai_provider",
            options=[
                _opt("anthropic", "Anthropic Claude", "Claude models"),
                _opt("openai", "OpenAI", "GPT models"),
                _opt("aws-bedrock", "AWS Bedrock", "Multiple AI models via AWS"),
                _opt("gemini", "Google Gemini", "Gemini models"),
            ],
            visible_when=VisibilityCondition(
                field="ai_templates", operator=ConditionOperator.NOT_EMPTY
            ),
        ),
        StepDescriptor(
            id="summary",
            title="Review",
            subtitle="Check your choices before generating",
            kind=StepKind.CUSTOM,
        ),
    ]


@lru_cache(maxsize=1)
def default_catalog() -> StepCatalog:
    """The wizard's built-in step catalog, constructed once per process."""
    return StepCatalog(_build_default_steps())
