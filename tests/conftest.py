"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - unit/       : Unit tests (pure functions, no I/O)
"""
import os
import sys
from decimal import Decimal
from typing import List

import pytest

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Assertion Helpers
# =============================================================================

class AssertionHelpers:
    """Custom assertion helpers for tests"""

    @staticmethod
    def assert_money(value: Decimal, expected: str):
        """Assert a Decimal amount equals the expected value and carries 2 decimals"""
        assert isinstance(value, Decimal), f"Expected Decimal, got {type(value).__name__}"
        assert value == Decimal(expected), f"Expected {expected}, got {value}"
        assert value.as_tuple().exponent == -2, f"Expected 2 decimal places, got {value}"

    @staticmethod
    def assert_has_fields(data: dict, fields: List[str]):
        """Assert dict has required fields"""
        missing = [f for f in fields if f not in data]
        assert not missing, f"Missing fields: {missing}"


@pytest.fixture
def assertions() -> AssertionHelpers:
    """Provide assertion helpers"""
    return AssertionHelpers()
