"""Tests for settings and the per-user .env writer."""

from core.config import AppSettings, write_user_env_vars


class TestAppSettings:
    def test_defaults(self, settings):
        assert settings.civitai_base_url == "https://civitai.com/api/v1"
        assert settings.huggingface_base_url == "https://huggingface.co/api"
        assert settings.comfyui_registry_base_url == "https://api.comfy.org"
        assert (settings.civitai_max_requests, settings.civitai_window_seconds) == (100, 60)
        assert (settings.huggingface_max_requests, settings.huggingface_window_seconds) == (1000, 3600)
        assert (settings.comfyui_registry_max_requests, settings.comfyui_registry_window_seconds) == (60, 60)
        assert settings.user_agent == "ComfyUI-Deployment-Builder/1.0"

    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("COMFY_CATALOG_CIVITAI_API_KEY", "abc")
        monkeypatch.setenv("COMFY_CATALOG_CIVITAI_MAX_REQUESTS", "5")

        settings = AppSettings(_env_file=None)

        assert settings.civitai_api_key == "abc"
        assert settings.civitai_max_requests == 5


class TestWriteUserEnvVars:
    def test_creates_and_merges(self, tmp_path):
        env_path = tmp_path / "cfg" / ".env"

        write_user_env_vars({"B_KEY": "2", "A_KEY": "1"}, env_path=env_path)
        write_user_env_vars({"A_KEY": "updated", "C_KEY": None}, env_path=env_path)

        lines = env_path.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("#")
        assert lines[1:] == ["A_KEY=updated", "B_KEY=2"]
