from memory_chat.config.settings import Settings, _load_config_from_yaml
from memory_chat.resources.errors import RetryConfig


def test_yaml_config_file(monkeypatch, tmp_path):
    cfg_file = tmp_path / "memory_chat.yaml"
    cfg_file.write_text("api_resource: chats\nretry_max_retries: 5\n", encoding="utf-8")
    monkeypatch.setenv("MEMORY_CHAT_CONFIG_FILE", str(cfg_file))
    assert _load_config_from_yaml()["retry_max_retries"] == 5

    cfg = Settings()
    assert cfg.api_resource == "chats"
    assert cfg.api_root == "/api/chats"
    assert cfg.retry_max_retries == 5


def test_env_overrides_yaml(monkeypatch, tmp_path):
    cfg_file = tmp_path / "memory_chat.yaml"
    cfg_file.write_text("retry_max_retries: 5\n", encoding="utf-8")
    monkeypatch.setenv("MEMORY_CHAT_CONFIG_FILE", str(cfg_file))
    monkeypatch.setenv("MEMORY_CHAT_RETRY_MAX_RETRIES", "1")
    assert Settings().retry_max_retries == 1


def test_non_mapping_yaml_is_ignored(monkeypatch, tmp_path):
    cfg_file = tmp_path / "memory_chat.yaml"
    cfg_file.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("MEMORY_CHAT_CONFIG_FILE", str(cfg_file))
    monkeypatch.chdir(tmp_path)
    assert _load_config_from_yaml() == {}


def test_retry_config_from_settings():
    cfg = Settings(
        retry_max_retries=2,
        retry_initial_delay_ms=500,
        retry_backoff_multiplier=3,
        retry_max_delay_ms=4000,
    )
    assert RetryConfig.from_settings(cfg) == RetryConfig(
        max_retries=2,
        initial_delay=500,
        backoff_multiplier=3,
        max_delay=4000,
    )
