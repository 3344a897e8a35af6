"""解压后端基类、注册表及内置后端"""
import importlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Type

from calldata_decoder.models.decoder_config import DEFAULT_MAX_OUTPUT_SIZE
from calldata_decoder.utils.exceptions import BackendError
from calldata_decoder.utils.log_utils import get_logger

logger = get_logger()


@dataclass(frozen=True)
class BackendSpec:
    """
    后端描述：压缩标记、类型标签以及用于延迟构造后端实例的工厂
    工厂接收 max_output_size 关键字参数
    """
    marker: int
    label: str
    factory: Callable[..., "CompressionBackend"]


# 全局后端注册表 - 按压缩标记组织
_backend_registry: Dict[int, BackendSpec] = {}


def register_backend(marker: int, label: str):
    """
    后端注册装饰器
    用于将后端类与压缩标记关联，后端实例在首次遇到该标记时才会构造

    :param marker: 压缩标记字节（0x00-0xFF）
    :param label: 压缩类型标签，例如 "ZSTD"

    使用示例:
        @register_backend(0x03, "LZ4")
        class Lz4Backend(CompressionBackend):
            def decompress(self, data: bytes) -> bytes:
                ...
    """
    if not 0 <= marker <= 0xFF:
        raise ValueError(f"压缩标记必须是单字节: {marker}")

    def decorator(cls: Type["CompressionBackend"]) -> Type["CompressionBackend"]:
        if not issubclass(cls, CompressionBackend):
            raise TypeError(f"被装饰的类 {cls.__name__} 必须继承 CompressionBackend")

        if marker in _backend_registry:
            logger.warning(f"压缩标记 0x{marker:02X} 已经注册，将被新的类 {cls.__name__} 覆盖")

        cls.marker = marker
        cls.name = label
        _backend_registry[marker] = BackendSpec(marker=marker, label=label, factory=cls)
        logger.debug(f"后端 0x{marker:02X} 注册成功: {cls.__name__}")

        return cls

    return decorator


def get_backend_spec(marker: int) -> Optional[BackendSpec]:
    """
    根据压缩标记获取后端描述

    :param marker: 压缩标记字节
    :return: 后端描述，如果不存在返回None
    """
    return _backend_registry.get(marker)


def get_backend_class(marker: int) -> Optional[Type["CompressionBackend"]]:
    """
    根据压缩标记获取后端类

    :param marker: 压缩标记字节
    :return: 后端类，如果不存在返回None
    """
    spec = _backend_registry.get(marker)
    return spec.factory if spec is not None else None


def list_registered_backends() -> List[BackendSpec]:
    """
    列出所有已注册的后端（按标记排序）

    :return: 后端描述列表
    """
    return [_backend_registry[marker] for marker in sorted(_backend_registry)]


class CompressionBackend(ABC):
    """
    解压后端基类
    所有后端必须继承此类并实现 decompress() 方法，输入非法时抛出 BackendError
    """
    marker: int = -1
    name: str = ""

    def __init__(self, max_output_size: int = DEFAULT_MAX_OUTPUT_SIZE):
        """
        :param max_output_size: 允许的最大解压输出字节数
        """
        self.max_output_size = max_output_size

    @abstractmethod
    def decompress(self, data: bytes) -> bytes:
        """
        解压字节序列（子类必须重写）
        :param data: 去除标记字节后的载荷
        :return: 解压后的字节
        :raises BackendError: 载荷损坏、截断或超出输出上限
        """
        raise NotImplementedError("后端需重写 decompress() 方法")

    def _check_output_size(self, size: int) -> None:
        if size > self.max_output_size:
            raise BackendError(
                f"decompressed size {size} exceeds limit of {self.max_output_size} bytes"
            )


@register_backend(0x00, "Uncompressed")
class IdentityBackend(CompressionBackend):
    """未压缩数据，原样返回"""

    def decompress(self, data: bytes) -> bytes:
        return bytes(data)


@register_backend(0x02, "ZSTD")
class ZstdBackend(CompressionBackend):
    """
    Zstandard 解压后端
    使用流式解压，帧头未声明内容大小的帧同样可以解压；多个连续帧依次解压拼接
    """

    # 统计解压大小时每次读取的字节数
    READ_SIZE = 128 * 1024

    def __init__(self, max_output_size: int = DEFAULT_MAX_OUTPUT_SIZE):
        super().__init__(max_output_size)
        # 首次使用时才加载 zstandard 扩展模块
        self._zstd = importlib.import_module("zstandard")
        logger.debug(f"zstandard {self._zstd.__version__} 加载完成")

    def decompress(self, data: bytes) -> bytes:
        data = bytes(data)
        try:
            # ZstdDecompressor 不能跨线程共享，每次调用单独创建
            self._measure(self._zstd.ZstdDecompressor(), data)
            return self._decompress_frames(self._zstd.ZstdDecompressor(), data)
        except self._zstd.ZstdError as e:
            raise BackendError(str(e)) from e

    def _measure(self, dctx, data: bytes) -> None:
        """分块流式读取并丢弃输出，超出上限时立即中止"""
        total = 0
        with dctx.stream_reader(data, read_across_frames=True) as reader:
            while True:
                chunk = reader.read(self.READ_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                self._check_output_size(total)

    def _decompress_frames(self, dctx, data: bytes) -> bytes:
        """逐帧解压，检测截断帧；输出大小已由 _measure 限定"""
        output = bytearray()
        remaining = data
        while True:
            dobj = dctx.decompressobj()
            output += dobj.decompress(remaining)
            self._check_output_size(len(output))
            if not dobj.eof:
                raise BackendError("truncated zstd frame")
            remaining = dobj.unused_data
            if not remaining:
                break
        return bytes(output)
