"""解码器配置加载器"""
import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from dotenv import load_dotenv
from pydantic import ValidationError

from calldata_decoder.models.decoder_config import DecoderConfig
from calldata_decoder.utils.exceptions import ConfigValidationError
from calldata_decoder.utils.log_utils import get_logger

logger = get_logger()

ENV_PREFIX = "CALLDATA_DECODER_"


def load_toml_config(config_file: Path) -> Dict[str, Any]:
    """
    加载TOML配置文件
    配置可以放在 [decoder] 表下，也可以直接写在顶层

    配置示例:
        [decoder]
        backend_timeout = 5.0
        max_output_size = 1048576
        disabled_markers = ["0x01"]

        [decoder.log_config]
        level = "DEBUG"

    :param config_file: 配置文件路径
    :return: 配置字典
    """
    if not config_file.exists():
        raise FileNotFoundError(f"配置文件不存在: {config_file}")

    logger.info(f"加载解码器配置: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        raw_config = toml.load(f)

    # 如果配置有嵌套结构（例如 [decoder]），提取内容
    if "decoder" in raw_config:
        return raw_config["decoder"]
    return raw_config


def apply_env_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    使用环境变量覆盖配置（会先加载当前目录下的 .env 文件）
    支持: CALLDATA_DECODER_LOG_LEVEL, CALLDATA_DECODER_TIMEOUT, CALLDATA_DECODER_MAX_OUTPUT_SIZE
    :param config_dict: 原始配置字典
    :return: 覆盖后的配置字典
    """
    load_dotenv()
    merged = dict(config_dict)

    log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
    if log_level:
        log_config = dict(merged.get("log_config") or {})
        log_config["level"] = log_level
        merged["log_config"] = log_config

    timeout = os.getenv(f"{ENV_PREFIX}TIMEOUT")
    if timeout:
        merged["backend_timeout"] = timeout

    max_output_size = os.getenv(f"{ENV_PREFIX}MAX_OUTPUT_SIZE")
    if max_output_size:
        merged["max_output_size"] = max_output_size

    return merged


def load_decoder_config(config_file: Optional[Path] = None) -> DecoderConfig:
    """
    加载解码器配置（TOML文件 + 环境变量覆盖）
    :param config_file: 配置文件路径，None 时只使用默认值和环境变量
    :return: DecoderConfig
    :raises ConfigValidationError: 配置校验失败
    """
    config_dict = load_toml_config(Path(config_file)) if config_file else {}
    config_dict = apply_env_overrides(config_dict)
    try:
        return DecoderConfig(**config_dict)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise ConfigValidationError(f"解码器配置验证失败: {details}") from e
