"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载 Widget 配置。
字段名与前端 Config 保持一致（API_BASE_URL、CHAT_ENDPOINT、MAX_RETRIES、
TIMEOUT_MS、USE_MOCK），环境变量不区分大小写。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("CHAT_WIDGET_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
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


class WidgetSettings(BaseSettings):
    """Widget 配置（使用 Pydantic）。"""

    # ---- 推理后端 ----
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="推理后端基础URL",
    )
    chat_endpoint: str = Field(default="/chat", description="聊天接口路径")
    max_retries: int = Field(default=3, ge=0, description="首次请求失败后的最大重试次数")
    timeout_ms: int = Field(default=10000, gt=0, description="单次请求超时时间（毫秒）")
    use_mock: bool = Field(
        default=True,
        description="为 True 时使用本地模拟回复，不访问网络",
    )

    # ---- 模拟模式 ----
    mock_min_latency_ms: int = Field(default=1200, ge=0, description="模拟延迟下限（毫秒）")
    mock_max_latency_ms: int = Field(default=2000, ge=0, description="模拟延迟上限（毫秒，不含）")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录，为空时输出到 stderr")
    log_level: str = Field(default="INFO", description="日志级别")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @model_validator(mode="after")
    def validate_latency_window(self) -> "WidgetSettings":
        if self.mock_max_latency_ms < self.mock_min_latency_ms:
            raise ValueError("mock_max_latency_ms must be >= mock_min_latency_ms")
        return self

    @property
    def chat_url(self) -> str:
        return f"{self.api_base_url}{self.chat_endpoint}"

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


settings = WidgetSettings()
