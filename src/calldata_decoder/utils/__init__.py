"""工具模块导出"""
from calldata_decoder.utils.codec import Base64Codec
from calldata_decoder.utils.exceptions import (
    BackendError,
    BackendFailureError,
    ConfigValidationError,
    DecodeError,
    DecodeTimeoutError,
    EmptyInputError,
    InvalidBase64Error,
    UnknownMarkerError,
)
from calldata_decoder.utils.hex_utils import HexFormatter

__all__ = [
    "Base64Codec",
    "HexFormatter",
    "DecodeError",
    "InvalidBase64Error",
    "EmptyInputError",
    "UnknownMarkerError",
    "BackendFailureError",
    "DecodeTimeoutError",
    "BackendError",
    "ConfigValidationError",
]
