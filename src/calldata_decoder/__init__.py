"""Base64 调用数据解码器"""
from calldata_decoder.core import BackendContext, DecodePipeline, MarkerDecoder
from calldata_decoder.models.decode_result import DecodeOutcome, DecodeResult, DecodeStatus

__version__ = "0.1.0"

__all__ = [
    "BackendContext",
    "DecodePipeline",
    "MarkerDecoder",
    "DecodeOutcome",
    "DecodeResult",
    "DecodeStatus",
]
