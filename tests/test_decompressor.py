import unittest
import gzip
import zlib
import sys
import os

# Adjust path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'app'))

from decompressor import (
    Codec, CompressionGuess, decompress, detect_compression,
    inflate_gzip, inflate_raw, inflate_zlib,
)


def raw_deflate(data):
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


class TestDetectCompression(unittest.TestCase):
    def test_short_input(self):
        self.assertEqual(detect_compression(b""), CompressionGuess.NONE)
        self.assertEqual(detect_compression(b"\x1f"), CompressionGuess.NONE)

    def test_gzip_magic(self):
        self.assertEqual(detect_compression(gzip.compress(b"x")), CompressionGuess.GZIP)
        self.assertEqual(detect_compression(b"\x1f\x8b"), CompressionGuess.GZIP)

    def test_zlib_header_range(self):
        self.assertEqual(detect_compression(zlib.compress(b"x")), CompressionGuess.ZLIB)
        self.assertEqual(detect_compression(b"\x78\x01"), CompressionGuess.ZLIB)
        self.assertEqual(detect_compression(b"\x78\xda"), CompressionGuess.NONE)
        self.assertEqual(detect_compression(b"\x78\x00"), CompressionGuess.NONE)

    def test_plain_text(self):
        self.assertEqual(detect_compression(b"hello"), CompressionGuess.NONE)


class TestCodecs(unittest.TestCase):
    def test_each_codec_on_its_own_format(self):
        self.assertEqual(inflate_gzip(gzip.compress(b"abc")).text, "abc")
        self.assertEqual(inflate_zlib(zlib.compress(b"abc")).text, "abc")
        self.assertEqual(inflate_raw(raw_deflate(b"abc")).text, "abc")

    def test_header_mismatch_is_a_result_not_an_exception(self):
        result = inflate_gzip(zlib.compress(b"abc"))
        self.assertFalse(result.ok)
        self.assertEqual(result.codec, Codec.GZIP)
        self.assertTrue(result.error)

    def test_invalid_utf8_output_counts_as_failure(self):
        result = inflate_gzip(gzip.compress(b"\xff\xfe\xfd"))
        self.assertFalse(result.ok)
        self.assertIn("UTF-8", result.error)


class TestDecompress(unittest.TestCase):
    def test_gzip_round_trip(self):
        text = "Texte compressé ✓ " * 20
        outcome = decompress(gzip.compress(text.encode('utf-8')))
        self.assertTrue(outcome.succeeded)
        self.assertEqual(outcome.text, text)
        self.assertEqual(outcome.codec, Codec.GZIP)
        self.assertEqual(outcome.failures, [])

    def test_zlib_is_tried_after_gzip_fails(self):
        outcome = decompress(zlib.compress(b"abc"))
        self.assertEqual(outcome.codec, Codec.ZLIB)
        self.assertEqual([f.codec for f in outcome.failures], [Codec.GZIP])

    def test_raw_deflate_is_last(self):
        outcome = decompress(raw_deflate(b"payload"))
        self.assertEqual(outcome.text, "payload")
        self.assertEqual(outcome.codec, Codec.RAW_DEFLATE)
        self.assertEqual([f.codec for f in outcome.failures], [Codec.GZIP, Codec.ZLIB])

    def test_total_failure_keeps_every_error(self):
        outcome = decompress(b"\x1f\x8b\x00\x01")
        self.assertFalse(outcome.succeeded)
        self.assertIsNone(outcome.text)
        self.assertEqual([f.codec for f in outcome.failures], [Codec.GZIP, Codec.ZLIB, Codec.RAW_DEFLATE])
        summary = outcome.summary()
        for label in ("gzip:", "zlib:", "raw deflate:"):
            self.assertIn(label, summary)

    def test_every_gzip_member_is_inflated(self):
        payload = gzip.compress(b"hello ") + gzip.compress(b"world")
        self.assertEqual(gzip.decompress(payload), b"hello world")
        outcome = decompress(payload)
        self.assertEqual(outcome.text, "hello world")
        self.assertEqual(outcome.codec, Codec.GZIP)

    def test_zero_padding_after_gzip_is_ignored(self):
        self.assertEqual(inflate_gzip(gzip.compress(b"abc") + b"\x00" * 8).text, "abc")

    def test_trailing_bytes_are_a_codec_failure(self):
        self.assertFalse(inflate_gzip(gzip.compress(b"abc") + b"junkjunk").ok)
        result = inflate_zlib(zlib.compress(b"abc") + b"junk")
        self.assertFalse(result.ok)
        self.assertIn("trailing bytes", result.error)
        self.assertFalse(decompress(zlib.compress(b"abc") + b"junk").succeeded)

    def test_truncated_zlib_fails(self):
        data = zlib.compress(b"some longer text to compress" * 10)
        result = inflate_zlib(data[:-6])
        self.assertFalse(result.ok)

    def test_truncated_gzip_fails(self):
        data = gzip.compress(b"some longer text to compress" * 10)
        outcome = decompress(data[:len(data) // 2])
        self.assertFalse(outcome.succeeded)


if __name__ == '__main__':
    unittest.main()
