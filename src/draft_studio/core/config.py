"""
配置管理 - 从 .env 和环境变量读取
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """应用配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API 配置
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = True
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    # 数据库配置
    database_url: str = "sqlite:///./data/draft_studio.db"

    # 日志配置
    log_level: str = "INFO"

    # 版本链配置
    # 乐观锁冲突时的最大重试次数（不含首次尝试）
    version_append_max_retries: int = Field(default=3, ge=0)
    # 草稿第 1 版的默认变更说明
    default_initial_summary: str = "Initial version"


@lru_cache()
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()
