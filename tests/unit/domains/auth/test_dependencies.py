"""
Tests for caller identification in src/domains/auth/dependencies.py
"""

import pytest
from fastapi import HTTPException

from src.domains.auth.dependencies import MissingUserError, get_current_user_id


class TestGetCurrentUserId:
    """Test resolving the caller from the X-User-Id header."""

    def test_returns_header_value(self):
        assert get_current_user_id("test-user-id-123") == "test-user-id-123"

    def test_strips_whitespace(self):
        assert get_current_user_id("  test-user-id-123 ") == "test-user-id-123"

    @pytest.mark.parametrize("header", [None, "", "   "])
    def test_missing_identity(self, header):
        with pytest.raises(MissingUserError) as exc_info:
            get_current_user_id(header)

        assert isinstance(exc_info.value, HTTPException)
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Missing user identity"
