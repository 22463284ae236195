"""
使用 Pydantic Settings 进行配置管理
从 proctree.properties 文件和环境变量加载配置
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger

from core.enums import TermCountReset


class Settings(BaseSettings):
    """进程树控制器配置，包含参数校验"""

    # 日志配置
    LOG_LEVEL: str = Field(default="INFO", description="日志级别")
    LOG_FILE: Optional[str] = Field(default=None, description="日志文件路径")

    # 错误处理
    THROW_ON_ERROR: bool = Field(
        default=False, description="内部错误是否以异常形式抛出"
    )

    # 子进程等待
    WAIT_FOR_CHILD_INTERVAL_US: int = Field(
        default=5000, description="等待子进程时的轮询间隔（微秒）"
    )

    # 终止信号升级
    TERM_ESCALATION_THRESHOLD: int = Field(
        default=5, description="终止计数达到该值后改用 SIGKILL"
    )
    TERM_COUNT_RESET: TermCountReset = Field(
        default=TermCountReset.PER_SIGNAL, description="终止计数重置策略"
    )
    TERM_QUIET_PERIOD: float = Field(
        default=10.0, description="quiet_period 策略下的静默期（秒）"
    )

    model_config = SettingsConfigDict(
        env_file="proctree.properties",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("WAIT_FOR_CHILD_INTERVAL_US")
    @classmethod
    def validate_wait_interval(cls, v: int) -> int:
        if v < 1:
            raise ValueError("WAIT_FOR_CHILD_INTERVAL_US 至少为 1")
        return v

    @field_validator("TERM_ESCALATION_THRESHOLD")
    @classmethod
    def validate_escalation_threshold(cls, v: int) -> int:
        if v < 1:
            raise ValueError("TERM_ESCALATION_THRESHOLD 至少为 1")
        return v

    @field_validator("TERM_QUIET_PERIOD")
    @classmethod
    def validate_quiet_period(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("TERM_QUIET_PERIOD 必须大于 0")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL 必须为 {valid_levels} 中的一项")
        return v_upper

    @property
    def wait_for_child_interval(self) -> float:
        """
        获取轮询间隔

        返回:
            以秒为单位的轮询间隔，可直接传给 time.sleep
        """
        return self.WAIT_FOR_CHILD_INTERVAL_US / 1_000_000


# ========== 配置获取函数 ==========


@lru_cache()
def get_settings() -> Settings:
    """
    获取配置实例（单例）

    返回:
        配置实例
    """
    settings = Settings()
    logger.debug("Settings loaded")
    return settings


def reload_settings() -> Settings:
    """
    重新加载配置

    清除 lru_cache 缓存并重新加载配置

    返回:
        新的配置实例
    """
    get_settings.cache_clear()
    logger.debug("Settings reloaded")
    return get_settings()
