"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("MEMORY_CHAT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- 后端接口 ----
    api_base_url: str = Field(
        default="http://localhost:8080",
        description="后端服务根地址",
    )
    api_resource: str = Field(
        default="chat-memory",
        description="带记忆会话的资源名，对应 /api/<resource>",
    )
    simple_chat_path: str = Field(default="/api/chat", description="无状态单轮对话接口路径")
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 输入 ----
    max_message_length: int = Field(default=2000, ge=1, description="单条消息最大长度")

    # ---- 重试 ----
    retry_max_retries: int = Field(default=3, ge=0, description="最大重试次数")
    retry_initial_delay_ms: float = Field(default=1000, gt=0, description="首次重试延迟（毫秒）")
    retry_backoff_multiplier: float = Field(default=2.0, ge=1.0, description="指数退避倍数")
    retry_max_delay_ms: float = Field(default=10000, gt=0, description="单次重试延迟上限（毫秒）")
    auto_retry: bool = Field(default=False, description="加载失败后是否自动调度重试")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_level: str = Field(default="INFO", description="日志级别")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_prefix="MEMORY_CHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )

    @property
    def api_root(self) -> str:
        """带记忆会话接口的根路径，例如 /api/chat-memory。"""

        return f"/api/{self.api_resource.strip('/')}"


settings = Settings()
