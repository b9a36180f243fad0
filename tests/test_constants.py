"""Tests for constants module."""
from license_checker.constants import (
    DIRECT_PARENT,
    EXIT_ERROR,
    EXIT_ISSUES,
    EXIT_SUCCESS,
    LEGAL_DISCLAIMER,
    UNKNOWN_LICENSE,
)


class TestConstants:
    """Tests for module-level constants."""

    def test_exit_codes_are_distinct(self) -> None:
        """Test exit codes do not collide."""
        assert len({EXIT_SUCCESS, EXIT_ISSUES, EXIT_ERROR}) == 3
        assert EXIT_SUCCESS == 0

    def test_sentinels(self) -> None:
        """Test sentinel values used across the report."""
        assert UNKNOWN_LICENSE == "Unknown"
        assert DIRECT_PARENT == "Direct"

    def test_disclaimer_contains_not_legal_advice(self) -> None:
        """Test LEGAL_DISCLAIMER states it is not legal advice."""
        disclaimer_lower = LEGAL_DISCLAIMER.lower()
        assert "not" in disclaimer_lower
        assert "legal advice" in disclaimer_lower
