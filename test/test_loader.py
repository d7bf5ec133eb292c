import gzip
import os
import tempfile
import threading
import unittest
from io import BytesIO

import svgsharp
from svgsharp.core.context import LOG_INFO
from svgsharp.core.exceptions import EmptyPictureError, SvgParseError
from svgsharp.core.listener import ElementListener
from svgsharp.core.loader import Sharp, SharpPicture, decompress
from svgsharp.tools.geomstr import Geomstr

RECT_SVG = '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="50"><rect width="100" height="50" fill="#ff0000"/></svg>'


class OneWayStream:
    """Readable stream that can not seek."""

    def __init__(self, data):
        self._buffer = BytesIO(data)
        self.closed = False

    def read(self, size=-1):
        return self._buffer.read(size)

    def seekable(self):
        return False

    def close(self):
        self.closed = True


class TestDecompress(unittest.TestCase):
    def test_plain(self):
        stream = BytesIO(b"<svg/>")
        self.assertIs(decompress(stream), stream)
        self.assertEqual(stream.tell(), 0)

    def test_gzip(self):
        stream = decompress(BytesIO(gzip.compress(b"<svg/>")))
        self.assertEqual(stream.read(), b"<svg/>")

    def test_not_seekable(self):
        stream = decompress(OneWayStream(gzip.compress(b"<svg/>")))
        self.assertEqual(stream.read(), b"<svg/>")


class TestSharp(unittest.TestCase):
    def check_rect(self, picture):
        self.assertIsInstance(picture, SharpPicture)
        self.assertEqual(len(picture), 1)
        self.assertEqual(picture.limits, (0, 0, 100, 50))
        self.assertEqual(picture.bounds, (0, 0, 100, 50))
        self.assertIs(picture.require_content(), picture)

    def test_load_string(self):
        self.check_rect(Sharp.load_string(RECT_SVG).get_picture())

    def test_load_bytes_gzip(self):
        self.check_rect(Sharp.load_bytes(gzip.compress(RECT_SVG.encode("utf-8"))).get_picture())

    def test_load_file(self):
        handle, path = tempfile.mkstemp(suffix=".svgz")
        try:
            with os.fdopen(handle, "wb") as f:
                f.write(gzip.compress(RECT_SVG.encode("utf-8")))
            sharp = Sharp.load_file(path)
            self.check_rect(sharp.get_picture())
            # Sources can be parsed again.
            self.check_rect(sharp.get_picture())
        finally:
            os.remove(path)

    def test_load_missing_file(self):
        with self.assertRaises(SvgParseError):
            Sharp.load_file(os.path.join(tempfile.gettempdir(), "does-not-exist.svg")).get_picture()

    def test_load_stream_not_closed(self):
        stream = OneWayStream(RECT_SVG.encode("utf-8"))
        self.check_rect(Sharp.load_stream(stream).get_picture())
        self.assertFalse(stream.closed)

    def test_malformed(self):
        with self.assertRaises(SvgParseError):
            Sharp.load_string("<svg><rect></svg>").get_picture()

    def test_empty_picture(self):
        picture = Sharp.load_string('<svg width="10" height="10"></svg>').get_picture()
        self.assertIsNone(picture.limits)
        with self.assertRaises(EmptyPictureError):
            picture.require_content()

    def test_listener(self):
        calls = []

        class Ids(ElementListener):
            def on_element(self, element_id, element, element_bounds, canvas, document_bounds, paint):
                calls.append(element_id)
                return element

        listener = Ids()
        sharp = Sharp.load_string(RECT_SVG.replace("<rect", '<rect id="r"'))
        sharp.add_listener(listener).get_picture()
        self.assertEqual(calls, ["r"])
        sharp.remove_listener(listener).get_picture()
        self.assertEqual(calls, ["r"])

    def test_prepare_texts(self):
        svg = '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"><text y="5">$who</text></svg>'
        sharp = Sharp.load_string(svg).prepare_texts({"$who": "me"})
        picture = sharp.get_picture()
        self.assertEqual(picture.elements[0].geometry.run.text, "me")
        self.assertEqual(sharp.text_substitutions, {})
        picture = sharp.get_picture()
        self.assertEqual(picture.elements[0].geometry.run.text, "$who")

    def test_watch(self):
        messages = []
        sharp = Sharp.load_string('<svg><foo/><circle cx="1" cy="1"/></svg>').watch(messages.append)
        sharp.get_picture()
        self.assertTrue(any("Unrecognized SVG command: foo" in m for m in messages))
        self.assertFalse(any("Missing geometry" in m for m in messages))

        messages.clear()
        sharp.with_log_level(LOG_INFO).watch(messages.append, LOG_INFO).get_picture()
        self.assertTrue(any("Missing geometry" in m for m in messages))

    def test_load_path(self):
        path = Sharp.load_path("M0,0 L10,10")
        self.assertIsInstance(path, Geomstr)
        self.assertEqual(path.last_point, complex(10, 10))

    def test_parse_async(self):
        done = threading.Event()
        results = []

        def callback(picture, error):
            results.append((picture, error))
            done.set()

        thread = Sharp.load_string(RECT_SVG).parse_async(callback)
        self.assertTrue(done.wait(10))
        thread.join(10)
        picture, error = results[0]
        self.assertIsNone(error)
        self.check_rect(picture)

    def test_parse_async_error(self):
        done = threading.Event()
        results = []

        def callback(picture, error):
            results.append((picture, error))
            done.set()

        Sharp.load_string("<svg>").parse_async(callback)
        self.assertTrue(done.wait(10))
        picture, error = results[0]
        self.assertIsNone(picture)
        self.assertIsInstance(error, SvgParseError)

    def test_parse_async_listener_failure(self):
        class Failing(ElementListener):
            def on_element(self, element_id, element, element_bounds, canvas, document_bounds, paint):
                raise ValueError("listener failed")

        done = threading.Event()
        results = []

        def callback(picture, error):
            results.append((picture, error))
            done.set()

        Sharp.load_string(RECT_SVG).add_listener(Failing()).parse_async(callback)
        self.assertTrue(done.wait(10))
        picture, error = results[0]
        self.assertIsNone(picture)
        self.assertIsInstance(error, ValueError)

    def test_package_exports(self):
        self.assertIs(svgsharp.Sharp, Sharp)
        picture = svgsharp.load_path_picture(RECT_SVG)
        self.assertEqual(picture.bounds, (0, 0, 100, 50))
        self.assertTrue(svgsharp.__version__)
