"""
NADA 解压后端

NADA 针对以零字节为主的 EVM 调用数据设计，格式如下:
    header: LEB128 无符号变长整数，表示解压后长度
    body:   0xFF 以外的字节为字面量
            0xFF 0x00          -> 字面量 0xFF
            0xFF <LEB128 n>    -> n 个零字节 (n >= 1)
"""
from typing import Tuple

from calldata_decoder.core.backends import CompressionBackend, register_backend
from calldata_decoder.utils.exceptions import BackendError

ESCAPE = 0xFF
# 64位整数的 LEB128 编码最多10个字节
MAX_VARINT_BYTES = 10


def read_varint(data: bytes, offset: int) -> Tuple[int, int]:
    """
    读取 LEB128 无符号变长整数
    :param data: 字节序列
    :param offset: 起始偏移
    :return: (数值, 读取后的偏移)
    :raises BackendError: 变长整数被截断或过长
    """
    value = 0
    shift = 0
    for i in range(MAX_VARINT_BYTES):
        pos = offset + i
        if pos >= len(data):
            raise BackendError(f"truncated varint at offset {offset}")
        byte = data[pos]
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, pos + 1
        shift += 7
    raise BackendError(f"varint too long at offset {offset}")


def nada_decode(data: bytes, max_output_size: int) -> bytes:
    """
    解码 NADA 字节流
    :param data: NADA 编码数据
    :param max_output_size: 允许的最大输出字节数
    :return: 解码后的字节
    :raises BackendError: 数据为空、截断、长度不匹配或超出上限
    """
    if not data:
        raise BackendError("empty NADA stream")

    expected, pos = read_varint(data, 0)
    if expected > max_output_size:
        raise BackendError(
            f"declared size {expected} exceeds limit of {max_output_size} bytes"
        )

    output = bytearray()
    end = len(data)
    while pos < end:
        byte = data[pos]
        pos += 1
        if byte != ESCAPE:
            output.append(byte)
        else:
            if pos >= end:
                raise BackendError("truncated escape sequence at end of stream")
            run, pos = read_varint(data, pos)
            if run == 0:
                output.append(ESCAPE)
            elif len(output) + run > expected:
                raise BackendError(
                    f"zero run of {run} bytes exceeds declared size of {expected} bytes"
                )
            else:
                output.extend(bytes(run))
        if len(output) > expected:
            raise BackendError(
                f"decoded data exceeds declared size of {expected} bytes"
            )

    if len(output) != expected:
        raise BackendError(
            f"decoded size {len(output)} does not match declared size {expected}"
        )
    return bytes(output)


@register_backend(0x01, "NADA")
class NadaBackend(CompressionBackend):
    """NADA 零字节游程解压后端"""

    def decompress(self, data: bytes) -> bytes:
        return nada_decode(bytes(data), self.max_output_size)
