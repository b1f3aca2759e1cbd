# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

import pytest

from src.core.config.settings import clear_settings_cache


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Drop cached settings so environment patches take effect."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_course_date() -> datetime:
    """Provide the date of the sample course."""
    return datetime(2026, 11, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_student_data() -> dict[str, Any]:
    """Provide personal data of a student for testing."""
    return {
        "first_name": "Jane",
        "last_name": "Doe",
        "phone": "+49 30 1234567",
        "email": "jane.doe@example.com",
    }
