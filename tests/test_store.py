"""Unit tests for the configuration store (scaffold_wizard.store).

Tests cover:
- adjust_backend_framework / adjust_project_structure
- apply_auto_adjustments, gated on the touched keys
- Clearing AI selections that an update makes unusable
- ConfigStore update, replace, reset and subscriptions
"""

from __future__ import annotations

import pytest

from scaffold_wizard.models import ScaffoldConfiguration
from scaffold_wizard.store import (
    ConfigStore,
    adjust_backend_framework,
    adjust_project_structure,
    apply_auto_adjustments,
)


# ---------------------------------------------------------------------------
# Auto-adjustments
# ---------------------------------------------------------------------------


class TestAdjustBackendFramework:
    @pytest.mark.unit
    def test_nextjs_api_dropped_without_nextjs(self):
        assert adjust_backend_framework("react", "nextjs-api") == "none"

    @pytest.mark.unit
    def test_nextjs_api_kept_with_nextjs(self):
        assert adjust_backend_framework("nextjs", "nextjs-api") == "nextjs-api"

    @pytest.mark.unit
    def test_unset_frontend_keeps_backend(self):
        assert adjust_backend_framework(None, "nextjs-api") == "nextjs-api"

    @pytest.mark.unit
    def test_other_backends_untouched(self):
        assert adjust_backend_framework("vue", "express") == "express"


class TestAdjustProjectStructure:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "frontend, backend, current, expected",
        [
            ("nextjs", "nextjs-api", None, "nextjs-only"),
            ("react", "none", None, "react-spa"),
            ("vue", "none", "fullstack-monorepo", "react-spa"),
            ("nextjs", "express", None, "fullstack-monorepo"),
            ("nextjs", "nestjs", "nextjs-only", "fullstack-monorepo"),
            ("react", "express", "react-spa", "express-api-only"),
            ("react", "fastify", "nextjs-only", "express-api-only"),
            ("react", "express", "fullstack-monorepo", "fullstack-monorepo"),
            ("react", "express", None, None),
        ],
    )
    def test_derivation(self, frontend, backend, current, expected):
        assert adjust_project_structure(frontend, backend, current) == expected

    @pytest.mark.unit
    def test_unset_framework_keeps_current(self):
        assert adjust_project_structure(None, "express", "react-spa") == "react-spa"
        assert adjust_project_structure("nextjs", None, "react-spa") == "react-spa"


class TestApplyAutoAdjustments:
    @pytest.mark.unit
    def test_unchanged_config_is_returned_as_is(self, empty_config: ScaffoldConfiguration):
        assert apply_auto_adjustments(empty_config) is empty_config

    @pytest.mark.unit
    def test_switching_away_from_nextjs(self, nextjs_config: ScaffoldConfiguration):
        adjusted = apply_auto_adjustments(nextjs_config.with_changes(frontend_framework="react"))
        assert adjusted.backend_framework == "none"
        assert adjusted.project_structure == "react-spa"

    @pytest.mark.unit
    def test_untouched_frameworks_skip_structure(self, named_config: ScaffoldConfiguration):
        config = named_config.with_changes(
            frontend_framework="react", backend_framework="none", project_structure="fullstack-monorepo"
        )
        adjusted = apply_auto_adjustments(config, named_config, ["project_structure"])
        assert adjusted is config

    @pytest.mark.unit
    def test_ai_selection_kept_without_previous(self, nextjs_config: ScaffoldConfiguration):
        config = nextjs_config.with_changes(
            frontend_framework="react", ai_templates=["chatbot"], ai_provider="openai"
        )
        assert apply_auto_adjustments(config).ai_templates == ["chatbot"]


class TestAiCleanup:
    @pytest.fixture
    def ai_store(self, nextjs_config: ScaffoldConfiguration) -> ConfigStore:
        store = ConfigStore(nextjs_config)
        store.update(ai_templates=["chatbot"], ai_provider="openai")
        return store

    @pytest.mark.unit
    def test_leaving_nextjs_clears_ai_selection(self, ai_store: ConfigStore):
        ai_store.update(frontend_framework="react")
        assert ai_store.snapshot.ai_templates == []
        assert ai_store.snapshot.ai_provider is None

    @pytest.mark.unit
    def test_monorepo_keeps_ai_selection(self, ai_store: ConfigStore):
        ai_store.update(backend_framework="express")
        assert ai_store.snapshot.project_structure == "fullstack-monorepo"
        ai_store.update(frontend_framework="react")
        # express + fullstack-monorepo stays a monorepo
        assert ai_store.snapshot.project_structure == "fullstack-monorepo"
        assert ai_store.snapshot.ai_templates == ["chatbot"]
        assert ai_store.snapshot.ai_provider == "openai"

    @pytest.mark.unit
    def test_structure_change_clears_ai_selection(self, named_config: ScaffoldConfiguration):
        store = ConfigStore(
            named_config.with_changes(
                frontend_framework="vue",
                backend_framework="express",
                project_structure="fullstack-monorepo",
                ai_templates=["chatbot"],
                ai_provider="anthropic",
            )
        )
        store.update(project_structure="express-api-only")
        assert store.snapshot.ai_templates == []
        assert store.snapshot.ai_provider is None

    @pytest.mark.unit
    def test_already_incompatible_selection_is_kept(self, react_config: ScaffoldConfiguration):
        store = ConfigStore(react_config.with_changes(ai_templates=["chatbot"]))
        store.update(frontend_framework="vue")
        assert store.snapshot.ai_templates == ["chatbot"]

    @pytest.mark.unit
    def test_unrelated_update_keeps_ai_selection(self, ai_store: ConfigStore):
        ai_store.update(database="supabase")
        assert ai_store.snapshot.ai_templates == ["chatbot"]

    @pytest.mark.unit
    def test_cleanup_notifies_once(self, ai_store: ConfigStore):
        seen = []
        ai_store.subscribe(lambda prev, cur: seen.append(cur.ai_templates))
        ai_store.update(frontend_framework="svelte")
        assert seen == [[]]


# ---------------------------------------------------------------------------
# ConfigStore
# ---------------------------------------------------------------------------


class TestConfigStore:
    @pytest.mark.unit
    def test_initial_snapshot(self, store: ConfigStore):
        assert store.snapshot == ScaffoldConfiguration()

    @pytest.mark.unit
    def test_custom_initial_snapshot(self, named_config: ScaffoldConfiguration):
        assert ConfigStore(named_config).snapshot is named_config

    @pytest.mark.unit
    def test_update_applies_adjustments(self, store: ConfigStore):
        store.update(frontend_framework="nextjs", backend_framework="nextjs-api")
        assert store.snapshot.project_structure == "nextjs-only"

    @pytest.mark.unit
    def test_explicit_structure_is_kept(self, named_config: ScaffoldConfiguration):
        store = ConfigStore(
            named_config.with_changes(
                frontend_framework="react", backend_framework="none", project_structure="react-spa"
            )
        )
        store.update(project_structure="fullstack-monorepo")
        assert store.snapshot.project_structure == "fullstack-monorepo"
        store.update(styling="tailwind")
        assert store.snapshot.project_structure == "fullstack-monorepo"

    @pytest.mark.unit
    def test_framework_change_rederives_structure(self, named_config: ScaffoldConfiguration):
        store = ConfigStore(
            named_config.with_changes(
                frontend_framework="react", backend_framework="none", project_structure="fullstack-monorepo"
            )
        )
        store.update(backend_framework="none", frontend_framework="vue")
        assert store.snapshot.project_structure == "react-spa"

    @pytest.mark.unit
    def test_update_returns_new_snapshot(self, store: ConfigStore):
        before = store.snapshot
        after = store.update(database="supabase")
        assert after is store.snapshot
        assert before.database is None

    @pytest.mark.unit
    def test_listener_receives_previous_and_current(self, store: ConfigStore):
        seen = []
        store.subscribe(lambda prev, cur: seen.append((prev.database, cur.database)))
        store.update(database="mongodb")
        assert seen == [(None, "mongodb")]

    @pytest.mark.unit
    def test_noop_update_does_not_notify(self, store: ConfigStore):
        seen = []
        store.update(database="mongodb")
        store.subscribe(lambda prev, cur: seen.append(cur))
        store.update(database="mongodb")
        assert seen == []

    @pytest.mark.unit
    def test_unsubscribe(self, store: ConfigStore):
        seen = []
        unsubscribe = store.subscribe(lambda prev, cur: seen.append(cur))
        unsubscribe()
        unsubscribe()
        store.update(auth="clerk")
        assert seen == []

    @pytest.mark.unit
    def test_replace_skips_adjustments(self, store: ConfigStore):
        raw = ScaffoldConfiguration(frontend_framework="react", backend_framework="nextjs-api")
        store.replace(raw)
        assert store.snapshot.backend_framework == "nextjs-api"

    @pytest.mark.unit
    def test_reset_restores_initial(self, named_config: ScaffoldConfiguration):
        store = ConfigStore(named_config)
        seen = []
        store.update(styling="tailwind")
        store.subscribe(lambda prev, cur: seen.append(cur))
        store.reset()
        assert store.snapshot == named_config
        assert len(seen) == 1
