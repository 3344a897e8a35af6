"""十六进制格式化工具模块"""
import string


class HexFormatter:
    """字节序列与规范十六进制字符串（大写、两位、单空格分隔）之间的转换"""

    SEPARATOR = " "

    @staticmethod
    def format(data: bytes) -> str:
        """
        将字节序列格式化为规范十六进制字符串
        :param data: 字节序列
        :return: 例如 b"He" -> "48 65"，空字节返回空字符串
        """
        return HexFormatter.SEPARATOR.join(f"{byte:02X}" for byte in data)

    @staticmethod
    def parse(text: str) -> bytes:
        """
        解析规范十六进制字符串（format 的逆操作）
        :param text: 十六进制字符串，允许大小写混合及多余空白
        :return: 字节序列
        :raises ValueError: 存在非两位十六进制的分组
        """
        tokens = text.split()
        for token in tokens:
            if len(token) != 2 or any(c not in string.hexdigits for c in token):
                raise ValueError(f"非法的十六进制分组: {token!r}")
        return bytes(int(token, 16) for token in tokens)
