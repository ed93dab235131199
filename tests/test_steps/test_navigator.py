"""Unit tests for StepNavigator (scaffold_wizard.steps.navigator).

Tests cover:
- Visible step computation for different configurations
- Forward/backward navigation skipping hidden steps
- Absolute <-> visible index translation
"""

from __future__ import annotations

import pytest

from scaffold_wizard.models import ScaffoldConfiguration
from scaffold_wizard.steps.catalog import StepCatalog, StepDescriptor, StepKind, VisibilityCondition
from scaffold_wizard.steps.navigator import StepNavigator

ROUTER = 3
AI_PROVIDER = 10
SUMMARY = 11


@pytest.fixture
def nextjs_ai() -> ScaffoldConfiguration:
    return ScaffoldConfiguration(frontend_framework="nextjs", ai_templates=["chatbot"])


class TestVisibleSteps:
    @pytest.mark.unit
    def test_conditional_steps_hidden_by_default(
        self, navigator: StepNavigator, empty_config: ScaffoldConfiguration
    ):
        ids = [step.id for step in navigator.get_visible_steps(empty_config)]
        assert "nextjs-router" not in ids
        assert "ai-provider" not in ids
        assert navigator.count_visible(empty_config) == 10

    @pytest.mark.unit
    def test_nextjs_shows_router(self, navigator: StepNavigator):
        config = ScaffoldConfiguration(frontend_framework="nextjs")
        assert navigator.is_visible(ROUTER, config)
        assert navigator.count_visible(config) == 11

    @pytest.mark.unit
    def test_all_visible(self, navigator: StepNavigator, nextjs_ai: ScaffoldConfiguration):
        assert navigator.count_visible(nextjs_ai) == 12

    @pytest.mark.unit
    def test_out_of_range_not_visible(self, navigator: StepNavigator, empty_config):
        assert not navigator.is_visible(-1, empty_config)
        assert not navigator.is_visible(SUMMARY + 1, empty_config)

    @pytest.mark.unit
    def test_visible_steps_keep_catalog_order(self, navigator: StepNavigator, nextjs_ai):
        visible = navigator.get_visible_steps(nextjs_ai)
        assert [step.id for step in visible] == [step.id for step in navigator.catalog]


class TestForwardBackward:
    @pytest.mark.unit
    def test_next_skips_hidden_router(self, navigator: StepNavigator):
        config = ScaffoldConfiguration(frontend_framework="react")
        assert navigator.get_next_visible_step_index(2, config) == 4

    @pytest.mark.unit
    def test_next_enters_router_for_nextjs(self, navigator: StepNavigator):
        config = ScaffoldConfiguration(frontend_framework="nextjs")
        assert navigator.get_next_visible_step_index(2, config) == ROUTER

    @pytest.mark.unit
    def test_previous_skips_hidden_router(self, navigator: StepNavigator):
        config = ScaffoldConfiguration(frontend_framework="vue")
        assert navigator.get_previous_visible_step_index(4, config) == 2

    @pytest.mark.unit
    def test_ai_provider_skipped_without_templates(self, navigator: StepNavigator, empty_config):
        assert navigator.get_next_visible_step_index(9, empty_config) == SUMMARY
        assert navigator.get_previous_visible_step_index(SUMMARY, empty_config) == 9

    @pytest.mark.unit
    def test_end_of_catalog(self, navigator: StepNavigator, empty_config):
        assert navigator.get_next_visible_step_index(SUMMARY, empty_config) is None
        assert navigator.get_previous_visible_step_index(0, empty_config) is None

    @pytest.mark.unit
    def test_from_out_of_range_indices(self, navigator: StepNavigator, empty_config):
        assert navigator.get_next_visible_step_index(-5, empty_config) == 0
        assert navigator.get_previous_visible_step_index(99, empty_config) == SUMMARY

    @pytest.mark.unit
    def test_all_hidden(self, empty_config):
        hidden = VisibilityCondition(field="frontend_framework", value="nextjs")
        catalog = StepCatalog(
            [
                StepDescriptor(id="a", title="A", kind=StepKind.TEXT, visible_when=hidden),
                StepDescriptor(id="b", title="B", kind=StepKind.TEXT, visible_when=hidden),
            ]
        )
        navigator = StepNavigator(catalog)
        assert navigator.count_visible(empty_config) == 0
        assert navigator.get_next_visible_step_index(-1, empty_config) is None
        assert navigator.get_previous_visible_step_index(2, empty_config) is None


class TestIndexTranslation:
    @pytest.mark.unit
    def test_visible_index_shifts_after_hidden_step(self, navigator: StepNavigator, empty_config):
        assert navigator.get_visible_step_index(2, empty_config) == 2
        assert navigator.get_visible_step_index(4, empty_config) == 3

    @pytest.mark.unit
    def test_hidden_step_has_no_visible_index(self, navigator: StepNavigator, empty_config):
        assert navigator.get_visible_step_index(ROUTER, empty_config) is None
        assert navigator.get_visible_step_index(AI_PROVIDER, empty_config) is None

    @pytest.mark.unit
    def test_absolute_index(self, navigator: StepNavigator, empty_config):
        assert navigator.get_absolute_step_index(3, empty_config) == 4
        assert navigator.get_absolute_step_index(9, empty_config) == SUMMARY

    @pytest.mark.unit
    def test_absolute_index_out_of_range(self, navigator: StepNavigator, empty_config):
        assert navigator.get_absolute_step_index(-1, empty_config) is None
        assert navigator.get_absolute_step_index(10, empty_config) is None

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "config",
        [
            ScaffoldConfiguration(),
            ScaffoldConfiguration(frontend_framework="nextjs"),
            ScaffoldConfiguration(ai_templates=["chatbot"]),
            ScaffoldConfiguration(frontend_framework="nextjs", ai_templates=["semantic-search"]),
        ],
    )
    def test_translation_is_inverse(self, navigator: StepNavigator, config):
        for visible_index in range(navigator.count_visible(config)):
            absolute = navigator.get_absolute_step_index(visible_index, config)
            assert navigator.get_visible_step_index(absolute, config) == visible_index
        for absolute in range(len(navigator.catalog)):
            if navigator.is_visible(absolute, config):
                visible_index = navigator.get_visible_step_index(absolute, config)
                assert navigator.get_absolute_step_index(visible_index, config) == absolute
