"""Base64 编解码工具模块，用于调用数据（calldata）的文本表示"""
import base64
import binascii
import re

from calldata_decoder.utils.exceptions import InvalidBase64Error

# 标准Base64字母表（RFC 4648 §4），填充符最多两个且只能出现在末尾
_BASE64_PATTERN = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")


class Base64Codec:
    """Base64编解码工具类（严格遵循 RFC 4648，不接受 URL-safe 字母表）"""

    @staticmethod
    def encode(data: bytes) -> str:
        """
        对字节序列进行标准Base64编码
        :param data: 原始字节
        :return: Base64文本
        """
        return base64.b64encode(data).decode("ascii")

    @staticmethod
    def decode(text: str) -> bytes:
        """
        对Base64文本进行严格解码
        :param text: Base64文本（首尾空白会被去除）
        :return: 解码后的字节序列，空文本返回空字节
        :raises InvalidBase64Error: 包含非法字符或填充长度不正确
        """
        trimmed = text.strip()
        if not trimmed:
            return b""

        if not _BASE64_PATTERN.match(trimmed):
            raise InvalidBase64Error("Decoding error: invalid base64 characters in input")
        if len(trimmed) % 4 != 0:
            raise InvalidBase64Error(
                f"Decoding error: invalid base64 length {len(trimmed)} (must be a multiple of 4)"
            )

        try:
            return base64.b64decode(trimmed, validate=True)
        except binascii.Error as e:
            raise InvalidBase64Error(f"Decoding error: {e}") from e
