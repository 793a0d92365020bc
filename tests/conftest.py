"""Test configuration and fixtures for holdfix."""
import pytest

from holdfix.infrastructure.persistence.event_bus import EventBus
from holdfix.shared.configuration.settings import (
    ApplicationSettings, ClassificationSettings, RepairSettings, WirelengthSettings
)

from design_factory import build_carry_design, build_hold_design


@pytest.fixture
def hold_design():
    """Hold design with a short double detour and a long-line detour."""
    return build_hold_design()


@pytest.fixture
def carry_design():
    return build_carry_design()


@pytest.fixture
def settings():
    """Default application settings."""
    return ApplicationSettings()


@pytest.fixture
def wirelength_settings():
    return WirelengthSettings()


@pytest.fixture
def classification_settings():
    return ClassificationSettings()


@pytest.fixture
def repair_settings():
    return RepairSettings()


@pytest.fixture
def event_bus():
    return EventBus()
