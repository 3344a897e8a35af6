"""后端上下文：按压缩标记延迟构造并缓存后端实例"""
import threading
from typing import Dict, Iterable, Optional

from calldata_decoder.core.backends import BackendSpec, CompressionBackend, list_registered_backends
from calldata_decoder.models.decoder_config import DEFAULT_MAX_OUTPUT_SIZE, DecoderConfig
from calldata_decoder.utils.exceptions import BackendError
from calldata_decoder.utils.log_utils import get_logger

logger = get_logger()


class BackendContext:
    """
    后端实例的共享状态
    首次请求某个标记时在锁内构造后端实例，之后只读复用；构造失败不缓存，下次请求会重试构造
    可通过 specs 注入自定义（或伪造的）后端，便于测试分发器
    """

    def __init__(
        self,
        specs: Optional[Iterable[BackendSpec]] = None,
        max_output_size: int = DEFAULT_MAX_OUTPUT_SIZE,
        disabled_markers: Iterable[int] = (),
    ):
        """
        :param specs: 后端描述列表，默认使用全局注册表
        :param max_output_size: 传递给后端的最大解压输出字节数
        :param disabled_markers: 禁用的压缩标记（不能包含 0x00）
        """
        if specs is None:
            specs = list_registered_backends()
        self._specs: Dict[int, BackendSpec] = {spec.marker: spec for spec in specs}
        self.max_output_size = max_output_size
        self.disabled_markers = frozenset(disabled_markers)
        if 0x00 in self.disabled_markers:
            raise ValueError("未压缩标记 0x00 不能被禁用")
        self._instances: Dict[int, CompressionBackend] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: DecoderConfig) -> "BackendContext":
        """根据解码器配置创建上下文"""
        return cls(
            max_output_size=config.max_output_size,
            disabled_markers=config.disabled_markers,
        )

    def get_spec(self, marker: int) -> Optional[BackendSpec]:
        """
        获取标记对应的后端描述
        :param marker: 压缩标记字节
        :return: 后端描述，未知标记返回None
        """
        return self._specs.get(marker)

    def is_loaded(self, marker: int) -> bool:
        """后端实例是否已构造"""
        return marker in self._instances

    def get(self, marker: int) -> CompressionBackend:
        """
        获取（必要时构造）标记对应的后端实例
        :param marker: 压缩标记字节
        :return: 后端实例
        :raises KeyError: 未知标记
        :raises BackendError: 后端被禁用或构造失败
        """
        spec = self._specs.get(marker)
        if spec is None:
            raise KeyError(marker)
        if marker in self.disabled_markers:
            raise BackendError(f"{spec.label} backend is disabled by configuration")

        instance = self._instances.get(marker)
        if instance is not None:
            return instance

        with self._lock:
            instance = self._instances.get(marker)
            if instance is None:
                logger.debug(f"首次使用，开始构造后端 {spec.label} (0x{marker:02X})")
                try:
                    instance = spec.factory(max_output_size=self.max_output_size)
                except ImportError as e:
                    raise BackendError(f"failed to load {spec.label} backend: {e}") from e
                self._instances[marker] = instance
        return instance


_default_context: Optional[BackendContext] = None
_default_context_lock = threading.Lock()


def default_backend_context() -> BackendContext:
    """
    获取进程级默认后端上下文（使用全局注册表和默认配置）
    :return: BackendContext 实例
    """
    global _default_context
    if _default_context is None:
        with _default_context_lock:
            if _default_context is None:
                _default_context = BackendContext()
    return _default_context
