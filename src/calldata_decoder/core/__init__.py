"""核心模块导出"""
from calldata_decoder.core.backends import (
    BackendSpec,
    CompressionBackend,
    IdentityBackend,
    ZstdBackend,
    get_backend_class,
    get_backend_spec,
    list_registered_backends,
    register_backend,
)
from calldata_decoder.core.nada import NadaBackend
from calldata_decoder.core.backend_context import BackendContext, default_backend_context
from calldata_decoder.core.marker_decoder import MarkerDecoder, MarkerDecodeResult
from calldata_decoder.core.pipeline import DecodePipeline

__all__ = [
    "BackendSpec",
    "CompressionBackend",
    "IdentityBackend",
    "NadaBackend",
    "ZstdBackend",
    "register_backend",
    "get_backend_spec",
    "get_backend_class",
    "list_registered_backends",
    "BackendContext",
    "default_backend_context",
    "MarkerDecoder",
    "MarkerDecodeResult",
    "DecodePipeline",
]
