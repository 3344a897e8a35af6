"""解码器配置模型"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_MAX_OUTPUT_SIZE = 64 * 1024 * 1024
# loguru 内置日志级别
LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LogConfig(BaseModel):
    """日志配置模型"""

    level: str = Field(default="WARNING", description="日志级别")
    log_path: Optional[Path] = Field(default=None, description="日志文件路径")
    rotation: str = Field(default="10 MB", description="日志轮转规则")
    retention: int = Field(default=7, description="日志保留天数")

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """日志级别统一为大写，且必须是 loguru 内置级别"""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"不支持的日志级别: {v}")
        return level


class DecoderConfig(BaseModel):
    """解码器核心配置模型"""

    # 日志配置
    log_config: Optional[LogConfig] = Field(default=None, description="Loguru日志配置")
    # 异步解码超时时间（秒），None 表示不限制
    backend_timeout: Optional[float] = Field(default=None, gt=0, description="异步解码超时时间（秒）")
    # 解压输出上限（字节）
    max_output_size: int = Field(
        default=DEFAULT_MAX_OUTPUT_SIZE, gt=0, description="单次解压允许的最大输出字节数"
    )
    # 禁用的压缩标记，对应后端不会被加载
    disabled_markers: List[int] = Field(default_factory=list, description="禁用的压缩标记字节")

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("disabled_markers", mode="before")
    @classmethod
    def parse_markers(cls, v):
        """支持 "0x01" 形式的十六进制字符串"""
        if isinstance(v, list):
            return [int(item, 0) if isinstance(item, str) else item for item in v]
        return v

    @field_validator("disabled_markers")
    @classmethod
    def validate_markers(cls, v: List[int]) -> List[int]:
        """标记必须是单字节，且未压缩标记 0x00 不能被禁用"""
        for marker in v:
            if not 0 <= marker <= 0xFF:
                raise ValueError(f"压缩标记超出单字节范围: {marker}")
            if marker == 0x00:
                raise ValueError("未压缩标记 0x00 不能被禁用")
        return v
