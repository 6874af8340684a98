"""
GitHub токен в файле окружения.
"""
import pytest

from app.core.config import settings
from app.core.env_file import ENV_TEMPLATE


class TestUpdateEnv:
    def test_creates_file_from_template(self, client, env_file):
        response = client.post("/api/update-env", json={"GITHUB_TOKEN": "ghp_abc"})

        assert response.status_code == 200
        text = env_file.path.read_text(encoding="utf-8")
        assert text.startswith("# Portfolio Configuration")
        assert "GITHUB_TOKEN=ghp_abc" in text
        assert "ANALYTICS_ID=" in text
        assert env_file.read() == {"GITHUB_TOKEN": "ghp_abc"}

    def test_replaces_existing_key_in_place(self, client, env_file):
        env_file.path.write_text("FOO=bar\nGITHUB_TOKEN=old\nBAZ=qux\n", encoding="utf-8")

        client.post("/api/update-env", json={"GITHUB_TOKEN": "new"})

        lines = env_file.path.read_text(encoding="utf-8").splitlines()
        assert lines == ["FOO=bar", "GITHUB_TOKEN=new", "BAZ=qux"]

    def test_appends_missing_key(self, client, env_file):
        env_file.path.write_text("FOO=bar\n", encoding="utf-8")

        client.post("/api/update-env", json={"GITHUB_TOKEN": "t0ken"})

        assert env_file.read() == {"FOO": "bar", "GITHUB_TOKEN": "t0ken"}

    def test_token_required(self, client):
        response = client.post("/api/update-env", json={})
        assert response.status_code == 422

    @pytest.mark.parametrize("token", ["abc\nANALYTICS_ID=evil", "abc\rdef", "two words", "tab\there", "nul\x00byte"])
    def test_token_with_whitespace_rejected(self, client, env_file, token):
        response = client.post("/api/update-env", json={"GITHUB_TOKEN": token})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert not env_file.path.exists()

    def test_rejected_token_leaves_file_untouched(self, client, env_file):
        env_file.path.write_text("ANALYTICS_ID=real\nGITHUB_TOKEN=old\n", encoding="utf-8")

        client.post("/api/update-env", json={"GITHUB_TOKEN": "abc\nANALYTICS_ID=evil"})

        assert env_file.read() == {"ANALYTICS_ID": "real", "GITHUB_TOKEN": "old"}

    def test_env_file_refuses_multiline_value(self, env_file):
        with pytest.raises(ValueError):
            env_file.update({"GITHUB_TOKEN": "abc\nANALYTICS_ID=evil"})
        assert not env_file.path.exists()


class TestGitHubEnabled:
    def test_disabled_without_token(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GITHUB_TOKEN", "")
        assert client.get("/api/github-enabled").json() == {"enabled": False}

    def test_enabled_after_update(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GITHUB_TOKEN", "")
        client.post("/api/update-env", json={"GITHUB_TOKEN": "ghp_abc"})

        assert client.get("/api/github-enabled").json() == {"enabled": True}

    def test_enabled_from_process_env(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GITHUB_TOKEN", "from-env")
        assert client.get("/api/github-enabled").json() == {"enabled": True}

    def test_empty_token_in_template_is_disabled(self, client, env_file, monkeypatch):
        monkeypatch.setattr(settings, "GITHUB_TOKEN", "")
        env_file.path.write_text(ENV_TEMPLATE, encoding="utf-8")

        assert client.get("/api/github-enabled").json() == {"enabled": False}
