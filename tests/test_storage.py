"""Tests for storage, settings and the stored session gate."""
import base64
import json
import time

from chartdeck.models.session import SessionToken


def make_jwt(claims: dict) -> str:
    body = base64.urlsafe_b64encode(json.dumps(claims).encode()).decode().rstrip("=")
    return f"header.{body}.signature"


# =========================================================================
# atomic_write
# =========================================================================


class TestAtomicWrite:
    def test_text(self, tmp_path):
        from chartdeck.storage.paths import atomic_write
        target = tmp_path / "a" / "b" / "settings.json"
        atomic_write(target, "hello")
        assert target.read_text() == "hello"

    def test_overwrite_leaves_no_tmp(self, tmp_path):
        from chartdeck.storage.paths import atomic_write
        target = tmp_path / "session.json"
        atomic_write(target, "first")
        atomic_write(target, b"second")
        assert target.read_text() == "second"
        assert not (tmp_path / "session.json.tmp").exists()


# =========================================================================
# Token file
# =========================================================================


class TestTokens:
    def test_round_trip(self, tmp_path):
        from chartdeck.storage.tokens import TokenStore
        store = TokenStore(tmp_path / "nested" / "session.json")
        store.write(SessionToken(token="abc", username="kiro"))
        loaded = store.read()
        assert loaded.token == "abc"
        assert loaded.username == "kiro"

    def test_missing_file(self, tmp_path):
        from chartdeck.storage.tokens import TokenStore
        assert TokenStore(tmp_path / "nope.json").read() is None

    def test_corrupt_file(self, tmp_path):
        from chartdeck.storage.tokens import TokenStore
        path = tmp_path / "session.json"
        path.write_text("{not json")
        assert TokenStore(path).read() is None

    def test_document_without_token(self, tmp_path):
        from chartdeck.storage.tokens import TokenStore
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"username": "kiro"}))
        assert TokenStore(path).read() is None

    def test_clear(self, tmp_path):
        from chartdeck.storage.tokens import TokenStore
        store = TokenStore(tmp_path / "session.json")
        store.write(SessionToken(token="abc"))
        assert store.clear() is True
        assert not store.path.exists()
        assert store.clear() is False


# =========================================================================
# StoredSession
# =========================================================================


class TestStoredSession:
    def test_not_ready_until_loaded(self, tmp_path):
        from chartdeck.session import StoredSession
        session = StoredSession(tmp_path / "session.json")
        assert not session.is_ready()
        session.load()
        assert session.is_ready()
        assert not session.is_valid()
        assert session.token() is None

    def test_opaque_token_is_valid(self, tmp_path):
        from chartdeck.session import StoredSession
        path = tmp_path / "session.json"
        StoredSession(path).set_token(SessionToken(token="opaque"))
        session = StoredSession(path).load()
        assert session.is_valid()
        assert session.token() == "opaque"

    def test_expired_jwt_is_invalid(self, tmp_path):
        from chartdeck.session import StoredSession
        session = StoredSession(tmp_path / "session.json")
        session.set_token(SessionToken(token=make_jwt({"exp": time.time() - 10})))
        assert not session.is_valid()

    def test_jwt_inside_margin_is_invalid(self, tmp_path):
        from chartdeck.session import StoredSession
        session = StoredSession(tmp_path / "session.json")
        session.set_token(SessionToken(token=make_jwt({"exp": time.time() + 5})))
        assert not session.is_valid()

    def test_fresh_jwt_is_valid(self, tmp_path):
        from chartdeck.session import StoredSession
        session = StoredSession(tmp_path / "session.json")
        session.set_token(SessionToken(token=make_jwt({"exp": time.time() + 3600})))
        assert session.is_valid()

    def test_invalidate_removes_file(self, tmp_path):
        from chartdeck.session import StoredSession
        path = tmp_path / "session.json"
        session = StoredSession(path)
        session.set_token(SessionToken(token="abc"))
        assert path.exists()
        session.invalidate()
        assert session.token() is None
        assert not path.exists()
        assert session.is_ready()


class TestJwtExpiry:
    def test_not_a_jwt(self):
        from chartdeck.session import jwt_expiry
        assert jwt_expiry("opaque") is None
        assert jwt_expiry("a.b") is None

    def test_undecodable_payload(self):
        from chartdeck.session import jwt_expiry
        assert jwt_expiry("header.!!!.signature") is None

    def test_without_exp(self):
        from chartdeck.session import jwt_expiry
        assert jwt_expiry(make_jwt({"sub": "u42"})) is None

    def test_exp(self):
        from chartdeck.session import jwt_expiry
        assert jwt_expiry(make_jwt({"exp": 1700000000})) == 1700000000.0

    def test_non_numeric_exp_reads_as_expired(self, tmp_path):
        from chartdeck.session import StoredSession, jwt_expiry
        token = make_jwt({"exp": "soon"})
        assert jwt_expiry(token) == 0.0
        session = StoredSession(tmp_path / "session.json")
        session.set_token(SessionToken(token=token))
        assert not session.is_valid()


# =========================================================================
# Settings
# =========================================================================


class TestSettings:
    def test_defaults(self, tmp_path, monkeypatch):
        from chartdeck.config import load_settings
        for name in ("API_URL", "ASSET_BASE_URL", "TIMEOUT"):
            monkeypatch.delenv(f"CHARTDECK_{name}", raising=False)
        settings = load_settings(tmp_path / "settings.json")
        assert settings.api_url == "http://localhost:8000"
        assert settings.default_asset_base_url == "http://localhost:8000"

    def test_file_then_env(self, tmp_path, monkeypatch):
        from chartdeck.config import Settings, load_settings, save_settings
        path = tmp_path / "settings.json"
        save_settings(Settings(api_url="http://file.test", timeout=5), path)
        monkeypatch.setenv("CHARTDECK_API_URL", "http://env.test")
        monkeypatch.delenv("CHARTDECK_TIMEOUT", raising=False)
        settings = load_settings(path)
        assert settings.api_url == "http://env.test"
        assert settings.timeout == 5

    def test_env_timeout_coerced(self, tmp_path, monkeypatch):
        from chartdeck.config import load_settings
        monkeypatch.setenv("CHARTDECK_TIMEOUT", "12.5")
        assert load_settings(tmp_path / "settings.json").timeout == 12.5

    def test_unreadable_file_uses_defaults(self, tmp_path, monkeypatch):
        from chartdeck.config import load_settings
        monkeypatch.delenv("CHARTDECK_API_URL", raising=False)
        path = tmp_path / "settings.json"
        path.write_text("[[[")
        assert load_settings(path).api_url == "http://localhost:8000"

    def test_asset_base_override(self):
        from chartdeck.config import Settings
        settings = Settings(api_url="http://api.test", asset_base_url="https://cdn.test")
        assert settings.default_asset_base_url == "https://cdn.test"
