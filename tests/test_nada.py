import pytest

from calldata_decoder.core.nada import NadaBackend, nada_decode, read_varint
from calldata_decoder.utils.exceptions import BackendError


def test_read_varint_multi_byte():
    assert read_varint(b"\xac\x02", 0) == (300, 2)
    assert read_varint(b"\x00\x7f", 1) == (127, 2)


def test_literals_only():
    assert nada_decode(b"\x02AB", 1024) == b"AB"


def test_zero_run():
    assert nada_decode(b"\x05\xff\x04\x01", 1024) == b"\x00\x00\x00\x00\x01"


def test_escaped_ff_literal():
    assert nada_decode(b"\x02\xff\x00\xff\x01", 1024) == b"\xff\x00"


def test_long_zero_run():
    assert nada_decode(b"\xac\x02\xff\xac\x02", 1024) == bytes(300)


def test_empty_output():
    assert nada_decode(b"\x00", 1024) == b""


@pytest.mark.parametrize(
    "data",
    [
        b"",                    # 空数据
        b"\x80",                # 长度头被截断
        b"\x02A",               # 长度不匹配
        b"\x01\xff",            # 转义序列被截断
        b"\x01\xff\x05",        # 零字节游程超出声明长度
        b"\x01AB",              # 字面量超出声明长度
        b"\xff" * 11,           # 变长整数过长
    ],
)
def test_malformed_streams(data):
    with pytest.raises(BackendError):
        nada_decode(data, 1024)


def test_declared_size_over_limit():
    with pytest.raises(BackendError, match="exceeds limit"):
        nada_decode(b"\xac\x02\xff\xac\x02", 100)


def test_backend_uses_configured_limit():
    backend = NadaBackend(max_output_size=4)
    assert backend.decompress(b"\x04\xff\x04") == bytes(4)
    with pytest.raises(BackendError):
        backend.decompress(b"\x05\xff\x05")
