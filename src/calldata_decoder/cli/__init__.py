"""命令行接口"""
import json
import sys
from pathlib import Path

import click
import toml

from calldata_decoder.core.backends import list_registered_backends
from calldata_decoder.core.pipeline import DecodePipeline
from calldata_decoder.models.decode_result import DecodeOutcome, DecodeStatus
from calldata_decoder.models.decoder_config import LOG_LEVELS, LogConfig
from calldata_decoder.utils.codec import Base64Codec
from calldata_decoder.utils.config_loader import load_decoder_config
from calldata_decoder.utils.exceptions import ConfigValidationError
from calldata_decoder.utils.hex_utils import HexFormatter
from calldata_decoder.utils.log_utils import setup_logger_from_config


def _echo_outcome(outcome: DecodeOutcome) -> None:
    """以文本形式输出单个解码结果"""
    if outcome.error is not None:
        prefix = "❌" if outcome.is_fatal else "⚠️"
        click.echo(f"{prefix} {outcome.error.message}", err=True)
    if outcome.result is None:
        return
    result = outcome.result
    click.echo(f"压缩类型: {result.compression_type}")
    click.echo(f"原始大小: {result.original_size} | 解码大小: {result.decoded_size}")
    click.echo(f"十六进制数据: {result.hex_data}")


@click.group()
def cli():
    """Calldata Decoder CLI - Base64 调用数据解码命令行工具"""
    pass


@cli.command("decode")
@click.argument("inputs", nargs=-1, required=True)
@click.option("--conf", "-c", help="解码器配置文件路径（TOML格式）")
@click.option("--json", "as_json", is_flag=True, help="以JSON格式输出")
@click.option("--strict", is_flag=True, help="存在非致命错误（未知标记/解压失败）时返回退出码2")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="日志级别（覆盖配置文件）",
)
def decode(inputs, conf: str = None, as_json: bool = False, strict: bool = False, log_level: str = None):
    """解码Base64调用数据（INPUTS 为 - 时从标准输入读取）"""
    try:
        config = load_decoder_config(Path(conf) if conf else None)
    except (FileNotFoundError, ConfigValidationError, toml.TomlDecodeError) as e:
        click.echo(f"❌ 配置加载失败：{e}", err=True)
        sys.exit(1)

    log_config = config.log_config or LogConfig()
    if log_level:
        log_config = log_config.model_copy(update={"level": log_level.upper()})
    setup_logger_from_config(log_config)

    texts = [sys.stdin.read() if item == "-" else item for item in inputs]
    pipeline = DecodePipeline(config=config)
    outcomes = pipeline.decode_many(texts)

    if as_json:
        payload = [outcome.to_dict() for outcome in outcomes]
        click.echo(json.dumps(payload[0] if len(payload) == 1 else payload, ensure_ascii=False, indent=2))
    else:
        for index, outcome in enumerate(outcomes):
            if len(outcomes) > 1:
                click.echo(f"[{index}]")
            _echo_outcome(outcome)

    statuses = {outcome.status for outcome in outcomes}
    if DecodeStatus.FATAL in statuses:
        sys.exit(1)
    if strict and DecodeStatus.WARNING in statuses:
        sys.exit(2)
    sys.exit(0)


@cli.command("markers")
def markers():
    """列出已注册的压缩标记"""
    for spec in list_registered_backends():
        click.echo(f"0x{spec.marker:02X}  {spec.label}")


@cli.command("hex2bin")
@click.argument("hex_text")
def hex2bin(hex_text: str):
    """将十六进制字符串转换为Base64文本（用于构造输入）"""
    try:
        data = HexFormatter.parse(hex_text)
    except ValueError as e:
        click.echo(f"❌ 十六进制解析失败：{e}", err=True)
        sys.exit(1)
    click.echo(Base64Codec.encode(data))


if __name__ == "__main__":
    cli()
