import asyncio
import threading

import pytest

from calldata_decoder.core.backend_context import BackendContext
from calldata_decoder.core.backends import BackendSpec, CompressionBackend
from calldata_decoder.core.pipeline import DecodePipeline
from calldata_decoder.models.decode_result import DecodeOutcome, DecodeResult, DecodeStatus
from calldata_decoder.models.decoder_config import DecoderConfig
from calldata_decoder.utils.exceptions import (
    BackendFailureError,
    DecodeTimeoutError,
    EmptyInputError,
    InvalidBase64Error,
    UnknownMarkerError,
)
from calldata_decoder.utils.hex_utils import HexFormatter


class TestDecode:

    def test_uncompressed_example(self, pipeline):
        outcome = pipeline.decode("AEhlbGxvCg==")
        assert outcome.status is DecodeStatus.OK
        assert outcome.error is None
        assert outcome.result.compression_type == "Uncompressed (0x00)"
        assert outcome.result.hex_data == "48 65 6C 6C 6F 0A"
        assert outcome.result.original_size == 12
        assert outcome.result.decoded_size == 6

    def test_original_size_uses_trimmed_text(self, pipeline):
        outcome = pipeline.decode("\n  AEhlbGxvCg==  \t")
        assert outcome.result.original_size == 12

    def test_unknown_marker_only(self, pipeline):
        outcome = pipeline.decode("/w==")
        assert outcome.status is DecodeStatus.WARNING
        assert outcome.result.compression_type == "Unknown (0xFF)"
        assert outcome.result.hex_data == ""
        assert outcome.result.decoded_size == 0
        assert isinstance(outcome.error, UnknownMarkerError)
        assert outcome.error.marker == 0xFF

    def test_invalid_base64(self, pipeline):
        outcome = pipeline.decode("AEhl!bG8=")
        assert outcome.status is DecodeStatus.FATAL
        assert outcome.result is None
        assert isinstance(outcome.error, InvalidBase64Error)

    @pytest.mark.parametrize("text", ["", "   "])
    def test_empty_input(self, pipeline, text):
        outcome = pipeline.decode(text)
        assert outcome.is_fatal
        assert isinstance(outcome.error, EmptyInputError)

    def test_zstd_example(self, pipeline, encode_input, zstd_frame):
        outcome = pipeline.decode(encode_input(0x02, zstd_frame(b"AB")))
        assert outcome.ok
        assert outcome.result.compression_type == "ZSTD (0x02)"
        assert outcome.result.hex_data == "41 42"
        assert outcome.result.decoded_size == 2

    def test_zstd_without_content_size(self, pipeline, encode_input, zstd_frame):
        outcome = pipeline.decode(encode_input(0x02, zstd_frame(b"AB", write_content_size=False)))
        assert outcome.ok
        assert outcome.result.hex_data == "41 42"

    def test_zstd_failure_returns_raw_payload(self, pipeline, encode_input):
        outcome = pipeline.decode(encode_input(0x02, b"\xde\xad\xbe\xef"))
        assert outcome.status is DecodeStatus.WARNING
        assert outcome.result.compression_type == "ZSTD (0x02)"
        assert outcome.result.hex_data == "DE AD BE EF"
        assert outcome.result.decoded_size == 4
        assert isinstance(outcome.error, BackendFailureError)
        assert outcome.error.message.startswith("ZSTD decompression error:")

    def test_nada(self, pipeline, encode_input):
        outcome = pipeline.decode(encode_input(0x01, b"\x05\xff\x04\x01"))
        assert outcome.ok
        assert outcome.result.compression_type == "NADA (0x01)"
        assert outcome.result.hex_data == "00 00 00 00 01"

    def test_nada_failure_returns_raw_payload(self, pipeline, encode_input):
        outcome = pipeline.decode(encode_input(0x01, b"\x09AB"))
        assert outcome.status is DecodeStatus.WARNING
        assert outcome.result.hex_data == "09 41 42"
        assert outcome.error.scheme == "NADA"

    @pytest.mark.parametrize(
        "payload", [b"", b"\x00", b"calldata", bytes(range(256)) * 3]
    )
    def test_decoded_size_matches_hex(self, pipeline, encode_input, payload):
        for marker in (0x00, 0x01, 0x02, 0x42):
            result = pipeline.decode(encode_input(marker, payload)).result
            assert result.decoded_size == len(HexFormatter.parse(result.hex_data))

    def test_decode_many(self, pipeline):
        outcomes = pipeline.decode_many(["AEhlbGxvCg==", "/w==", "!!"])
        assert [outcome.status for outcome in outcomes] == [
            DecodeStatus.OK,
            DecodeStatus.WARNING,
            DecodeStatus.FATAL,
        ]

    def test_pipeline_from_config(self, encode_input, zstd_frame):
        pipeline = DecodePipeline(config=DecoderConfig(disabled_markers=[0x02]))
        outcome = pipeline.decode(encode_input(0x02, zstd_frame(b"AB")))
        assert isinstance(outcome.error, BackendFailureError)
        assert outcome.result.decoded_size > 2


class TestDecodeOrRaise:

    def test_returns_result(self, pipeline):
        result = pipeline.decode_or_raise("AEhlbGxvCg==")
        assert isinstance(result, DecodeResult)
        assert result.hex_data == "48 65 6C 6C 6F 0A"

    def test_returns_degraded_result(self, pipeline):
        assert pipeline.decode_or_raise("/w==").compression_type == "Unknown (0xFF)"

    def test_raises_fatal(self, pipeline):
        with pytest.raises(InvalidBase64Error):
            pipeline.decode_or_raise("AEhlbGxvCg")


class SlowBackend(CompressionBackend):
    release = threading.Event()

    def decompress(self, data: bytes) -> bytes:
        self.release.wait(timeout=5)
        return data


class TestDecodeAsync:

    def test_decode_async(self, pipeline):
        outcome = asyncio.run(pipeline.decode_async("AEhlbGxvCg=="))
        assert outcome.result.hex_data == "48 65 6C 6C 6F 0A"

    def test_decode_async_fatal(self, pipeline):
        outcome = asyncio.run(pipeline.decode_async("###"))
        assert isinstance(outcome.error, InvalidBase64Error)

    def test_concurrent_decodes(self, pipeline, encode_input, zstd_frame):
        texts = [encode_input(0x02, zstd_frame(bytes([i]) * 10)) for i in range(10)]

        async def run_all():
            return await asyncio.gather(*(pipeline.decode_async(text) for text in texts))

        outcomes = asyncio.run(run_all())
        for i, outcome in enumerate(outcomes):
            assert outcome.result.hex_data == " ".join([f"{i:02X}"] * 10)

    def test_timeout(self, encode_input):
        SlowBackend.release.clear()
        context = BackendContext(specs=[BackendSpec(0x01, "Slow", SlowBackend)])
        pipeline = DecodePipeline(context=context, config=DecoderConfig(backend_timeout=0.05))

        async def run():
            try:
                return await pipeline.decode_async(encode_input(0x01, b"abc"))
            finally:
                SlowBackend.release.set()

        outcome = asyncio.run(run())
        assert outcome.is_fatal
        assert isinstance(outcome.error, DecodeTimeoutError)
        assert outcome.error.timeout == 0.05


class TestDecodeOutcome:

    def test_requires_result_or_error(self):
        with pytest.raises(ValueError):
            DecodeOutcome()

    def test_to_dict_uses_camel_case(self, pipeline):
        data = pipeline.decode("/w==").to_dict()
        assert data == {
            "status": "warning",
            "result": {
                "compressionType": "Unknown (0xFF)",
                "hexData": "",
                "originalSize": 4,
                "decodedSize": 0,
            },
            "error": {"stage": "unknown_marker", "message": "Unknown compression marker: 0xFF"},
        }

    def test_result_is_frozen(self, pipeline):
        result = pipeline.decode("AEhlbGxvCg==").result
        with pytest.raises(ValueError):
            result.hex_data = ""
