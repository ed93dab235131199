"""Shared pytest fixtures for the Scaffold Wizard test suite.

Provides reusable fixtures for:
- Configuration snapshots at various stages of the wizard
- Evaluators with a controllable clock
- The default step catalog, navigator and orchestrator
- Stores with option providers attached
"""

from __future__ import annotations

import pytest

from scaffold_wizard.compatibility.evaluator import CompatibilityEvaluator
from scaffold_wizard.compatibility.options import OptionProvider
from scaffold_wizard.compatibility.rules import CompatibilityRule, RuleRegistry
from scaffold_wizard.config import Config
from scaffold_wizard.models import ScaffoldConfiguration
from scaffold_wizard.steps.catalog import StepCatalog, default_catalog
from scaffold_wizard.steps.navigator import StepNavigator
from scaffold_wizard.store import ConfigStore
from scaffold_wizard.validation.orchestrator import ValidationOrchestrator


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced replacement for ``time.perf_counter`` (seconds)."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, milliseconds: float) -> None:
        self.now += milliseconds / 1000.0


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Configuration snapshots
# ---------------------------------------------------------------------------


@pytest.fixture
def empty_config() -> ScaffoldConfiguration:
    """Nothing chosen yet."""
    return ScaffoldConfiguration()


@pytest.fixture
def named_config() -> ScaffoldConfiguration:
    """Text steps done, no framework chosen."""
    return ScaffoldConfiguration(project_name="my-app", description="A demo application")


@pytest.fixture
def nextjs_config(named_config: ScaffoldConfiguration) -> ScaffoldConfiguration:
    """A complete, valid Next.js full-stack configuration."""
    return named_config.with_changes(
        frontend_framework="nextjs",
        backend_framework="nextjs-api",
        project_structure="nextjs-only",
        database="prisma-postgres",
        auth="nextauth",
        styling="tailwind",
    )


@pytest.fixture
def react_config(named_config: ScaffoldConfiguration) -> ScaffoldConfiguration:
    """A complete, valid React + Express configuration."""
    return named_config.with_changes(
        frontend_framework="react",
        backend_framework="express",
        project_structure="express-api-only",
        database="mongodb",
        auth="clerk",
        styling="css-modules",
    )


# ---------------------------------------------------------------------------
# Engine components
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Config:
    return Config()


@pytest.fixture
def evaluator(settings: Config, clock: FakeClock) -> CompatibilityEvaluator:
    """Evaluator over the built-in rules with a frozen clock."""
    return CompatibilityEvaluator(settings=settings, clock=clock)


@pytest.fixture
def make_rule():
    """Factory for ad-hoc compatibility rules targeting ``("backend", "express")``."""

    def _make(rule_id: str = "custom-rule", **overrides) -> CompatibilityRule:
        fields = dict(
            id=rule_id,
            description="custom rule",
            target_step="backend",
            target_option="express",
            is_incompatible=lambda config: True,
            get_message=lambda config: f"blocked by {rule_id}",
            reads=frozenset({"frontend_framework"}),
            conflicting_field="frontend_framework",
        )
        fields.update(overrides)
        return CompatibilityRule(**fields)

    return _make


@pytest.fixture
def make_evaluator(clock: FakeClock):
    """Factory for evaluators over a custom list of rules."""

    def _make(*rules: CompatibilityRule, settings: Config | None = None) -> CompatibilityEvaluator:
        return CompatibilityEvaluator(
            registry=RuleRegistry(rules), settings=settings or Config(), clock=clock
        )

    return _make


@pytest.fixture
def catalog() -> StepCatalog:
    return default_catalog()


@pytest.fixture
def navigator(catalog: StepCatalog) -> StepNavigator:
    return StepNavigator(catalog)


@pytest.fixture
def orchestrator(catalog: StepCatalog) -> ValidationOrchestrator:
    return ValidationOrchestrator(catalog)


@pytest.fixture
def store() -> ConfigStore:
    return ConfigStore()


@pytest.fixture
def provider(evaluator: CompatibilityEvaluator, store: ConfigStore) -> OptionProvider:
    option_provider = OptionProvider(evaluator, store)
    yield option_provider
    option_provider.close()
