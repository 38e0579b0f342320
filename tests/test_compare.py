import io
import unittest as ut

import chaos.io as cio
from tests.helpers import ChunkedSource


class TestContentEquals(ut.TestCase):

    def test_same_object(self):
        source = io.BytesIO(b"abc")
        self.assertTrue(cio.content_equals(source, source))
        self.assertEqual(source.tell(), 0)

    def test_equal_with_different_chunking(self):
        data = b"the quick brown fox" * 50
        self.assertTrue(cio.content_equals(ChunkedSource(data, 3), ChunkedSource(data, 7)))
        self.assertTrue(cio.content_equals(io.BytesIO(data), ChunkedSource(data, 1)))

    def test_equal_text(self):
        self.assertTrue(cio.content_equals(io.StringIO("text"), ChunkedSource("text", 1)))

    def test_both_empty(self):
        self.assertTrue(cio.content_equals(io.BytesIO(b""), io.BytesIO(b"")))

    def test_different(self):
        self.assertFalse(cio.content_equals(io.BytesIO(b"abcd"), io.BytesIO(b"abce")))

    def test_one_shorter(self):
        self.assertFalse(cio.content_equals(io.BytesIO(b"abc"), ChunkedSource(b"abcd", 2)))
        self.assertFalse(cio.content_equals(ChunkedSource(b"abcd", 3), io.BytesIO(b"abc")))
        self.assertFalse(cio.content_equals(io.BytesIO(b""), io.BytesIO(b"a")))


class TestContentEqualsIgnoreEol(ut.TestCase):

    def test_same_object(self):
        source = io.StringIO("a")
        self.assertTrue(cio.content_equals_ignore_eol(source, source))

    def test_mixed_line_endings(self):
        self.assertTrue(cio.content_equals_ignore_eol(io.StringIO("a\nb\r\n"), io.StringIO("a\r\nb\n")))

    def test_old_mac_line_endings(self):
        self.assertTrue(cio.content_equals_ignore_eol(io.StringIO("a\rb"), ChunkedSource("a\nb\n", 1)))

    def test_byte_sources(self):
        self.assertTrue(cio.content_equals_ignore_eol(io.BytesIO(b"x\r\ny"), io.BytesIO(b"x\ny\n"), "ascii"))

    def test_different_line_count(self):
        self.assertFalse(cio.content_equals_ignore_eol(io.StringIO("a\nb\n"), io.StringIO("a\nb\n\n")))
        self.assertFalse(cio.content_equals_ignore_eol(io.StringIO("a\n"), io.StringIO("a\nb")))

    def test_different_content(self):
        self.assertFalse(cio.content_equals_ignore_eol(io.StringIO("a\nb"), io.StringIO("a\nc")))

    def test_empty(self):
        self.assertTrue(cio.content_equals_ignore_eol(io.StringIO(""), io.StringIO("")))
