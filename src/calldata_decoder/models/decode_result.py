"""解码结果模型"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from calldata_decoder.utils.exceptions import DecodeError


class DecodeStatus(str, Enum):
    """
    解码状态（三态）
    OK: 成功，无错误
    WARNING: 产生了结果，同时附带非致命错误（未知标记 / 后端解压失败）
    FATAL: 致命错误，无结果
    """
    OK = "ok"
    WARNING = "warning"
    FATAL = "fatal"


class DecodeResult(BaseModel):
    """单次解码的结果记录，构造后不可修改"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # 压缩类型标签，例如 "ZSTD (0x02)"
    compression_type: str = Field(..., alias="compressionType", description="压缩类型标签")
    # 最终字节的十六进制表示
    hex_data: str = Field(..., alias="hexData", description="最终字节的规范十六进制字符串")
    # 去除首尾空白后的Base64文本长度（字符数）
    original_size: int = Field(..., ge=0, alias="originalSize", description="输入Base64文本长度")
    # 最终字节长度
    decoded_size: int = Field(..., ge=0, alias="decodedSize", description="最终字节长度")


class DecodeOutcome(BaseModel):
    """
    解码结果与错误的组合，result 和 error 可以同时存在
    - result 非空, error 为空: 正常成功
    - result 非空, error 非空: 降级结果（附带警告）
    - result 为空, error 非空: 致命错误
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    result: Optional[DecodeResult] = None
    error: Optional[DecodeError] = None

    @model_validator(mode="after")
    def check_not_empty(self) -> "DecodeOutcome":
        """结果与错误至少存在一个"""
        if self.result is None and self.error is None:
            raise ValueError("DecodeOutcome 必须包含结果或错误")
        return self

    @property
    def status(self) -> DecodeStatus:
        if self.result is None:
            return DecodeStatus.FATAL
        if self.error is not None:
            return DecodeStatus.WARNING
        return DecodeStatus.OK

    @property
    def ok(self) -> bool:
        return self.status is DecodeStatus.OK

    @property
    def is_fatal(self) -> bool:
        return self.status is DecodeStatus.FATAL

    def to_dict(self) -> Dict[str, Any]:
        """转换为可JSON序列化的字典（字段使用 camelCase 别名）"""
        error = None
        if self.error is not None:
            error = {"stage": self.error.stage, "message": self.error.message}
        return {
            "status": self.status.value,
            "result": self.result.model_dump(by_alias=True) if self.result is not None else None,
            "error": error,
        }
