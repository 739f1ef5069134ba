"""
应用配置模块

使用 pydantic-settings 管理环境变量和应用配置
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
import json

# 项目根目录
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """应用配置类"""

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # 应用基础配置
    app_name: str = "TalentFlow-API"
    app_env: str = "development"
    debug: bool = True

    # 数据库配置
    database_url: str = f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'talentflow.db'}"

    # CORS 配置
    cors_origins: List[str] = ["*"]

    # 网络模拟配置（毫秒 / 写操作失败概率）
    network_min_delay_ms: int = 200
    network_max_delay_ms: int = 1200
    network_failure_rate: float = 0.05

    # 种子数据配置
    seed_on_startup: bool = True
    seed_random_seed: Optional[int] = None
    seed_candidate_count: int = 1000

    # 业务配置
    jobs_page_size: int = 10
    shareable_link_base: str = "https://recruitify.app/assessment"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_path(cls, v):
        if isinstance(v, str) and "./data/" in v:
            return v.replace("./data/", str(BASE_DIR / "data") + "/")
        return v

    @field_validator("network_failure_rate")
    @classmethod
    def check_failure_rate(cls, v: float) -> float:
        if not 0 <= v <= 1:
            raise ValueError("network_failure_rate 必须在 0 到 1 之间")
        return v

    @model_validator(mode="after")
    def check_delay_range(self):
        if self.network_min_delay_ms < 0 or self.network_max_delay_ms < self.network_min_delay_ms:
            raise ValueError("网络延迟范围无效")
        return self


@lru_cache
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()
