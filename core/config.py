"""
配置文件 - 项目配置管理
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.settings import PaymentGatewaySettings


class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = "gatewayhub"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # 分组配置：支付网关采用嵌套模型（PAYMENTS__*）
    payments: PaymentGatewaySettings = Field(default_factory=PaymentGatewaySettings)

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings()
