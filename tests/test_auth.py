"""Tests for the admin bearer-token dependency."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from leadbot.auth import require_admin_token


class FakeSettings:
    def __init__(self, admin_api_key="", debug=False):
        self.admin_api_key = admin_api_key
        self.debug = debug


def _bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestRequireAdminToken:
    async def test_missing_token_with_key(self, monkeypatch):
        monkeypatch.setattr("leadbot.auth.settings", FakeSettings(admin_api_key="secret"))
        with pytest.raises(HTTPException) as exc_info:
            await require_admin_token(credentials=None)
        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    async def test_wrong_token(self, monkeypatch):
        monkeypatch.setattr("leadbot.auth.settings", FakeSettings(admin_api_key="secret"))
        with pytest.raises(HTTPException) as exc_info:
            await require_admin_token(credentials=_bearer("guess"))
        assert exc_info.value.status_code == 401

    async def test_correct_token(self, monkeypatch):
        monkeypatch.setattr("leadbot.auth.settings", FakeSettings(admin_api_key="secret"))
        await require_admin_token(credentials=_bearer("secret"))

    async def test_no_key_debug(self, monkeypatch):
        monkeypatch.setattr("leadbot.auth.settings", FakeSettings(debug=True))
        await require_admin_token(credentials=None)

    async def test_no_key_production(self, monkeypatch):
        monkeypatch.setattr("leadbot.auth.settings", FakeSettings())
        with pytest.raises(HTTPException) as exc_info:
            await require_admin_token(credentials=_bearer("anything"))
        assert exc_info.value.status_code == 403
