"""自定义异常类"""


class DecodeError(Exception):
    """
    解码错误基类
    stage 标识出错的阶段，fatal 标识是否为致命错误（致命错误不产生解码结果）
    """
    stage: str = "decode"
    fatal: bool = True

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidBase64Error(DecodeError):
    """输入文本不是合法的Base64编码"""
    stage = "invalid_base64"
    fatal = True


class EmptyInputError(DecodeError):
    """Base64解码后字节序列为空"""
    stage = "empty_input"
    fatal = True

    def __init__(self, message: str = "Invalid base64 data: decoded byte sequence is empty"):
        super().__init__(message)


class UnknownMarkerError(DecodeError):
    """未知的压缩标记字节（非致命，载荷原样透传）"""
    stage = "unknown_marker"
    fatal = False

    def __init__(self, marker: int):
        self.marker = marker
        super().__init__(f"Unknown compression marker: 0x{marker:02X}")


class BackendFailureError(DecodeError):
    """解压后端执行失败（非致命，返回未解压的原始载荷）"""
    stage = "backend_failure"
    fatal = False

    def __init__(self, scheme: str, message: str):
        self.scheme = scheme
        self.reason = message
        super().__init__(f"{scheme} decompression error: {message}")


class DecodeTimeoutError(DecodeError):
    """异步解码超时"""
    stage = "timeout"
    fatal = True

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Decoding timed out after {timeout} seconds")


class BackendError(Exception):
    """解压后端内部异常，仅由后端抛出，由分发器转换为 BackendFailureError"""
    pass


class ConfigValidationError(Exception):
    """配置验证失败异常"""
    pass
