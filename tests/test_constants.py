"""
Centralized test credentials and secrets.

All test-only credentials are loaded from environment variables when available,
with clearly non-production placeholders as fallbacks.
"""

from __future__ import annotations

import os

# Passwords must satisfy the complexity rules (8+ chars, upper, lower, digit)
TEST_PASSWORD = os.environ.get("TEST_PASSWORD") or "Abcdef12"
TEST_PASSWORD_WRONG = os.environ.get("TEST_PASSWORD_WRONG") or "Wrongpass9"
TEST_PASSWORD_WEAK = "abcdefgh"

# Accounts used across fixtures
TEST_EMAIL = "a@x.com"
TEST_NAME = "Alice"
TEST_INVITEE_EMAIL = "b@x.com"
TEST_INVITEE_NAME = "Bob"

# App config used by conftest
TEST_SECRET_KEY = os.environ.get("TEST_SECRET_KEY") or "test-secret-key"
TEST_ACCESS_TOKEN_PLACEHOLDER = os.environ.get("TEST_ACCESS_TOKEN") or "a.b.c"

# SMTP (email service tests)
TEST_SMTP_PASSWORD = os.environ.get("TEST_SMTP_PASSWORD") or "x"
