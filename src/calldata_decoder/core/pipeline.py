"""解码管线：Base64 -> 压缩标记分发 -> 十六进制格式化"""
import asyncio
from typing import Iterable, List, Optional

from calldata_decoder.core.backend_context import BackendContext, default_backend_context
from calldata_decoder.core.marker_decoder import MarkerDecoder
from calldata_decoder.models.decode_result import DecodeOutcome, DecodeResult
from calldata_decoder.models.decoder_config import DecoderConfig
from calldata_decoder.utils.codec import Base64Codec
from calldata_decoder.utils.exceptions import DecodeError, DecodeTimeoutError
from calldata_decoder.utils.hex_utils import HexFormatter
from calldata_decoder.utils.log_utils import get_logger

logger = get_logger()


class DecodePipeline:
    """
    解码管线，负责串联 Base64Codec、MarkerDecoder 与 HexFormatter
    decode() 永不抛出 DecodeError，而是返回 DecodeOutcome:
        - 致命错误（非法Base64、空输入）: 无结果
        - 非致命错误（未知标记、后端失败）: 结果与错误同时返回
    """

    def __init__(
        self,
        context: Optional[BackendContext] = None,
        config: Optional[DecoderConfig] = None,
    ):
        """
        :param context: 后端上下文，未提供时根据 config 创建；两者都未提供时使用进程级默认上下文
        :param config: 解码器配置
        """
        self.config = config or DecoderConfig()
        if context is None:
            context = BackendContext.from_config(config) if config is not None else default_backend_context()
        self.context = context
        self.marker_decoder = MarkerDecoder(context)

    def decode(self, text: str) -> DecodeOutcome:
        """
        解码一段Base64文本
        :param text: 用户输入文本（首尾空白会被去除）
        :return: DecodeOutcome
        """
        trimmed = text.strip()
        try:
            raw = Base64Codec.decode(trimmed)
            decoded = self.marker_decoder.decode(raw)
        except DecodeError as e:
            logger.error(f"解码失败 [{e.stage}]: {e.message}")
            return DecodeOutcome(error=e)

        result = DecodeResult(
            compression_type=decoded.compression_type,
            hex_data=HexFormatter.format(decoded.payload),
            original_size=len(trimmed),
            decoded_size=len(decoded.payload),
        )
        return DecodeOutcome(result=result, error=decoded.error)

    def decode_or_raise(self, text: str) -> DecodeResult:
        """
        严格模式解码：致命错误直接抛出，非致命错误只记录日志
        :param text: Base64文本
        :return: DecodeResult
        :raises DecodeError: 致命错误
        """
        outcome = self.decode(text)
        if outcome.result is None:
            raise outcome.error
        return outcome.result

    def decode_many(self, texts: Iterable[str]) -> List[DecodeOutcome]:
        """依次解码多段文本"""
        return [self.decode(text) for text in texts]

    async def decode_async(self, text: str) -> DecodeOutcome:
        """
        在工作线程中执行解码，避免阻塞事件循环
        配置了 backend_timeout 时超时返回 DecodeTimeoutError（工作线程不会被取消）
        :param text: Base64文本
        :return: DecodeOutcome
        """
        task = asyncio.to_thread(self.decode, text)
        timeout = self.config.backend_timeout
        if timeout is None:
            return await task
        try:
            return await asyncio.wait_for(task, timeout=timeout)
        except asyncio.TimeoutError:
            error = DecodeTimeoutError(timeout)
            logger.error(error.message)
            return DecodeOutcome(error=error)
