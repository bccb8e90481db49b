from todo_api.settings import get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("TODO_PORT", "TODO_MAX_LIMIT", "BASIC_AUTH_USERNAME", "STRICT_PUT_ID", "CORS_ALLOW_ORIGINS"):
            monkeypatch.delenv(name, raising=False)
        s = get_settings()
        assert s.port == 8080
        assert s.max_limit == 10
        assert (s.basic_auth_username, s.basic_auth_password) == ("admin", "admin")
        assert s.strict_put_id is False
        assert s.cors_allow_origins == ["*"]

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TODO_PORT", "9090")
        monkeypatch.setenv("TODO_MAX_LIMIT", "25")
        monkeypatch.setenv("STRICT_PUT_ID", "yes")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
        s = get_settings()
        assert s.port == 9090
        assert s.max_limit == 25
        assert s.strict_put_id is True
        assert s.cors_allow_origins == ["http://a.test", "http://b.test"]

    def test_invalid_numbers_fall_back(self, monkeypatch):
        monkeypatch.setenv("TODO_PORT", "eighty")
        monkeypatch.setenv("TODO_MAX_LIMIT", "0")
        s = get_settings()
        assert s.port == 8080
        assert s.max_limit == 10
