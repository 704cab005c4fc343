from types import SimpleNamespace

import pytest

from modules.core.identity import get_identity

pytestmark = pytest.mark.unit


class TestGetIdentity:
    def test_local_user_primary_key(self):
        request = SimpleNamespace(user=SimpleNamespace(pk=42))
        assert get_identity(request) == "42"

    def test_external_subject_claim_preferred(self):
        request = SimpleNamespace(user=SimpleNamespace(pk=42, sub="auth0|abc123"))
        assert get_identity(request) == "auth0|abc123"

    def test_blank_subject_falls_back_to_pk(self):
        request = SimpleNamespace(user=SimpleNamespace(pk=7, sub=""))
        assert get_identity(request) == "7"
