"""压缩标记分发器"""
from dataclasses import dataclass
from typing import Optional

from calldata_decoder.core.backend_context import BackendContext
from calldata_decoder.utils.exceptions import (
    BackendError,
    BackendFailureError,
    DecodeError,
    EmptyInputError,
    UnknownMarkerError,
)
from calldata_decoder.utils.log_utils import get_logger

logger = get_logger()


def format_label(label: str, marker: int) -> str:
    """压缩类型标签，例如 format_label("ZSTD", 2) -> "ZSTD (0x02)" """
    return f"{label} (0x{marker:02X})"


@dataclass(frozen=True)
class MarkerDecodeResult:
    """
    分发器输出：压缩类型、最终载荷以及可选的非致命错误
    error 非空时 payload 为降级载荷（未知标记或解压失败时的原始字节）
    """
    compression_type: str
    payload: bytes
    error: Optional[DecodeError] = None


class MarkerDecoder:
    """
    读取首字节压缩标记，选择后端并解压其余字节
    未知标记与后端失败不会中断解码，而是随结果一起返回错误
    """

    def __init__(self, context: BackendContext):
        """
        :param context: 后端上下文
        """
        self.context = context

    def decode(self, data: bytes) -> MarkerDecodeResult:
        """
        :param data: Base64解码后的原始字节
        :return: MarkerDecodeResult
        :raises EmptyInputError: 字节序列为空
        """
        if len(data) == 0:
            raise EmptyInputError()

        marker = data[0]
        payload = bytes(data[1:])

        spec = self.context.get_spec(marker)
        if spec is None:
            error = UnknownMarkerError(marker)
            logger.warning(error.message)
            return MarkerDecodeResult(
                compression_type=format_label("Unknown", marker),
                payload=payload,
                error=error,
            )

        compression_type = format_label(spec.label, marker)
        logger.debug(f"压缩类型 {compression_type}，载荷 {len(payload)} 字节")

        try:
            backend = self.context.get(marker)
            decoded = backend.decompress(payload)
        except BackendError as e:
            error = BackendFailureError(spec.label, str(e))
            logger.warning(f"{error.message}，返回未解压的原始载荷")
            return MarkerDecodeResult(
                compression_type=compression_type,
                payload=payload,
                error=error,
            )

        return MarkerDecodeResult(compression_type=compression_type, payload=bytes(decoded))
