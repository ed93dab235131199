"""Unit tests for field validators (scaffold_wizard.validation.fields).

Tests cover:
- Project name and description rules
- Enumerated choice validators
- Extras, AI templates and AI provider validators
- Validator lookup by name
"""

from __future__ import annotations

import pytest

from scaffold_wizard.models import ExtrasConfig, ScaffoldConfiguration
from scaffold_wizard.validation.fields import (
    FIELD_VALIDATORS,
    get_field_validator,
    validate_ai_provider,
    validate_ai_templates,
    validate_description,
    validate_extras,
    validate_project_name,
)


class TestProjectName:
    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["my-app", "app2", "a", "a-b-c", "x" * 50])
    def test_valid(self, name: str):
        assert validate_project_name(name).is_valid

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, error",
        [
            ("", "Project name is required"),
            ("   ", "Project name is required"),
            (None, "Project name is required"),
            ("x" * 51, "Project name must be 50 characters or less"),
            ("My-App", "Use lowercase letters, numbers, and hyphens only"),
            ("my_app", "Use lowercase letters, numbers, and hyphens only"),
            ("my app", "Use lowercase letters, numbers, and hyphens only"),
            ("-app", "Project name cannot start or end with a hyphen"),
            ("app-", "Project name cannot start or end with a hyphen"),
            ("my--app", "Project name cannot have consecutive hyphens"),
        ],
    )
    def test_invalid(self, name, error: str):
        result = validate_project_name(name)
        assert not result.is_valid
        assert result.error == error


class TestDescription:
    @pytest.mark.unit
    def test_valid(self):
        assert validate_description("A tool for building things").is_valid

    @pytest.mark.unit
    def test_required(self):
        assert validate_description("").error == "Description is required"

    @pytest.mark.unit
    def test_too_long(self):
        assert validate_description("d" * 201).error == "Description must be 200 characters or less"

    @pytest.mark.unit
    def test_at_limit(self):
        assert validate_description("d" * 200).is_valid


class TestChoiceValidators:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, good, message",
        [
            ("frontend_framework", "svelte", "Please select a frontend framework"),
            ("nextjs_router", "pages", "Please select a Next.js router"),
            ("backend_framework", "none", "Please select a backend option"),
            ("database", "drizzle-postgres", "Please select a database option"),
            ("auth", "clerk", "Please select an authentication option"),
            ("styling", "styled-components", "Please select a styling option"),
        ],
    )
    def test_accepts_known_and_rejects_unknown(self, name: str, good: str, message: str):
        validator = get_field_validator(name)
        assert validator(good, None).is_valid
        assert validator(None, None).error == message
        assert validator("cobol", None).error == message


class TestExtras:
    @pytest.mark.unit
    def test_valid(self):
        assert validate_extras(ExtrasConfig(docker=True)).is_valid

    @pytest.mark.unit
    def test_invalid(self):
        assert validate_extras({"docker": True}).error == "Invalid extras configuration"


class TestAITemplates:
    @pytest.mark.unit
    def test_empty_is_valid(self):
        assert validate_ai_templates([]).is_valid
        assert validate_ai_templates(None).is_valid

    @pytest.mark.unit
    def test_known_templates(self):
        assert validate_ai_templates(["chatbot", "image-generator"]).is_valid

    @pytest.mark.unit
    def test_unknown_template(self):
        assert validate_ai_templates(["chatbot", "oracle"]).error == "Invalid AI template: oracle"

    @pytest.mark.unit
    def test_not_a_list(self):
        assert validate_ai_templates("chatbot").error == "Invalid AI templates configuration"


class TestAIProvider:
    @pytest.mark.unit
    def test_not_required_without_templates(self):
        assert validate_ai_provider(None, ScaffoldConfiguration()).is_valid

    @pytest.mark.unit
    def test_required_with_templates(self):
        config = ScaffoldConfiguration(ai_templates=["chatbot"])
        result = validate_ai_provider(None, config)
        assert result.error == "Please select an AI provider for your templates"

    @pytest.mark.unit
    def test_unknown_provider(self):
        config = ScaffoldConfiguration(ai_templates=["chatbot"])
        assert validate_ai_provider("skynet", config).error == "Invalid AI provider: skynet"

    @pytest.mark.unit
    def test_known_provider(self):
        config = ScaffoldConfiguration(ai_templates=["chatbot"])
        assert validate_ai_provider("gemini", config).is_valid


class TestLookup:
    @pytest.mark.unit
    def test_registered_names(self):
        assert set(FIELD_VALIDATORS) == {
            "project_name",
            "description",
            "frontend_framework",
            "nextjs_router",
            "backend_framework",
            "database",
            "auth",
            "styling",
            "extras",
            "ai_templates",
            "ai_provider",
        }

    @pytest.mark.unit
    def test_unknown_name(self):
        with pytest.raises(KeyError):
            get_field_validator("color_scheme")
