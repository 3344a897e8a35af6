"""日志工具模块"""
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from loguru import logger

if TYPE_CHECKING:
    from calldata_decoder.models.decoder_config import LogConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    log_path: Optional[Path] = None,
    level: str = "WARNING",
    rotation: str = "10 MB",
    retention: int = 7,
    format_string: Optional[str] = None
) -> None:
    """
    配置 Loguru 日志
    解码结果输出到 stdout，日志统一写 stderr，避免污染 --json 输出
    :param log_path: 日志文件路径
    :param level: 日志级别
    :param rotation: 轮转规则
    :param retention: 保留天数
    :param format_string: 自定义格式字符串
    """
    logger.remove()

    logger.add(sys.stderr, level=level, format=format_string or CONSOLE_FORMAT)

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level=level,
            rotation=rotation,
            retention=f"{retention} days",
            format=format_string or FILE_FORMAT,
        )


def setup_logger_from_config(log_config: Optional["LogConfig"]) -> None:
    """
    根据日志配置模型初始化日志，未提供配置时使用默认值
    :param log_config: LogConfig 实例
    """
    if log_config is None:
        setup_logger()
        return
    setup_logger(
        log_path=log_config.log_path,
        level=log_config.level,
        rotation=log_config.rotation,
        retention=log_config.retention,
    )


def get_logger():
    """获取 logger 实例"""
    return logger
