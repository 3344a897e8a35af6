import pytest
import zstandard
from loguru import logger

from calldata_decoder.core.backend_context import BackendContext
from calldata_decoder.core.pipeline import DecodePipeline
from calldata_decoder.utils.codec import Base64Codec


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    # CLI 测试会把 handler 绑定到 CliRunner 的临时 stderr 上
    logger.remove()


@pytest.fixture(autouse=True)
def _clear_decoder_env(monkeypatch):
    for name in ("CALLDATA_DECODER_LOG_LEVEL", "CALLDATA_DECODER_TIMEOUT", "CALLDATA_DECODER_MAX_OUTPUT_SIZE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def pipeline():
    return DecodePipeline(context=BackendContext())


@pytest.fixture
def zstd_frame():
    def build(data: bytes, write_content_size: bool = True) -> bytes:
        return zstandard.ZstdCompressor(write_content_size=write_content_size).compress(data)
    return build


@pytest.fixture
def encode_input():
    def build(marker: int, payload: bytes) -> str:
        return Base64Codec.encode(bytes([marker]) + payload)
    return build
