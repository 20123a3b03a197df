"""
Test Configuration
==================

Pytest configuration with fixtures shared by unit and integration tests.
Provides test settings, sample language tables and fresh enum classes.
"""

import os

os.environ.setdefault("LANGUAGE_ATLAS_ENVIRONMENT", "testing")

import pytest
from enum import Enum
from typing import Callable, Generator, Type

from pydantic_settings import SettingsConfigDict

from language_atlas.config import settings as settings_module
from language_atlas.config.settings import Settings
from language_atlas.models.schemas import VariantType

from tests.utils.data_generators import LanguageTableGenerator, make_enum


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    log_level: str = "DEBUG"

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="LANGUAGE_ATLAS_")


@pytest.fixture(scope="session")
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(scope="session", autouse=True)
def override_settings(test_settings: TestSettings) -> Generator[TestSettings, None, None]:
    """Override generator settings for testing."""
    previous = settings_module.settings
    settings_module.settings = test_settings
    yield test_settings
    settings_module.settings = previous


@pytest.fixture
def enum_factory() -> Callable[..., Type[Enum]]:
    """Build a fresh Enum class per call so installed accessors never leak between tests."""
    return make_enum


@pytest.fixture
def language_type() -> VariantType:
    """English (default), Spanish, French."""
    return VariantType(name="Language", variants=["English", "Spanish", "French"])


@pytest.fixture
def worked_example() -> str:
    """The greeting/farewell/date/dummy table."""
    return LanguageTableGenerator.worked_example()


@pytest.fixture(params=["source", "table"])
def strategy(request: pytest.FixtureRequest) -> str:
    """Run a test once per emitter strategy."""
    return request.param
