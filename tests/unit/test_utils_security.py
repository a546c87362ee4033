import pytest
from fastapi import HTTPException
from starlette.requests import Request

from lawdesk.utils import security

def _request(headers=None, cookies=None):
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        raw.append((b"cookie", "; ".join(f"{k}={v}" for k, v in cookies.items()).encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw, "query_string": b""})

def test_extract_token_prefers_bearer():
    req = _request({"Authorization": "Bearer abc"}, {"sb_access": "cookie-token"})
    assert security.extract_token(req) == "abc"

def test_extract_token_falls_back_to_cookie():
    assert security.extract_token(_request(cookies={"sb_access": "cookie-token"})) == "cookie-token"
    assert security.extract_token(_request({"Authorization": "Basic xyz"})) == ""

def test_get_current_user_without_token():
    with pytest.raises(HTTPException) as exc:
        security.get_current_user(_request())
    assert exc.value.status_code == 401

def test_get_current_user_invalid_token(monkeypatch):
    def boom(token):
        raise RuntimeError("jwt expired")
    monkeypatch.setattr("lawdesk.auth.service.get_user_from_token", boom)
    with pytest.raises(HTTPException) as exc:
        security.get_current_user(_request({"Authorization": "Bearer t"}))
    assert exc.value.detail == "Session expired, please sign in again"

def test_get_current_user_valid(monkeypatch):
    monkeypatch.setattr("lawdesk.auth.service.get_user_from_token", lambda t: {"id": "u1", "token": t})
    assert security.get_current_user(_request({"Authorization": "Bearer t"})) == {"id": "u1", "token": "t"}

def test_optional_user_is_none_without_valid_session(monkeypatch):
    assert security.optional_user(_request()) is None

    def boom(token):
        raise RuntimeError("jwt expired")
    monkeypatch.setattr("lawdesk.auth.service.get_user_from_token", boom)
    assert security.optional_user(_request({"Authorization": "Bearer t"})) is None

def test_require_freelancer():
    assert security.require_freelancer({"id": "l1", "role": "freelancer"})["id"] == "l1"
    with pytest.raises(HTTPException) as exc:
        security.require_freelancer({"id": "u1", "role": "user"})
    assert exc.value.status_code == 403
