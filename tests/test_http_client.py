import datetime
import io
import unittest as ut
from unittest import mock

import requests

import chaos.http.client as http
from chaos.http import HttpRequestError


def _response(status_code: int = 200, text: str = "ok", elapsed_ms: int = 0, raw: bytes = b""):
    resp = mock.Mock(spec=requests.Response)
    resp.status_code = status_code
    resp.text = text
    resp.elapsed = datetime.timedelta(milliseconds=elapsed_ms)
    resp.raw = io.BytesIO(raw)
    return resp


class TestHttpRequestClient(ut.TestCase):

    def setUp(self):
        patcher = mock.patch("chaos.http.client.requests.request")
        self.request = patcher.start()
        self.addCleanup(patcher.stop)
        self.request.return_value = _response()

    def _call(self, idx: int = -1):
        return self.request.call_args_list[idx]

    def test_default_headers(self):
        headers = http.default_headers()
        self.assertEqual(headers["Cache-Control"], "no-cache")
        self.assertEqual(headers["Accept"], "*/*")
        self.assertIn("Mozilla/5.0", headers["User-Agent"])

    def test_get(self):
        self.request.return_value = _response(text="body")
        self.assertEqual(http.get("http://example.com/a"), "body")
        args, kwargs = self._call()
        self.assertEqual(args, ("GET", "http://example.com/a"))
        self.assertEqual(kwargs["headers"], http.default_headers())
        self.assertEqual(kwargs["timeout"], (10, 30))

    def test_get_custom_headers(self):
        http.get("http://example.com/a", {"X-Test": "1"})
        self.assertEqual(self._call()[1]["headers"], {"X-Test": "1"})

    def test_status_and_judge(self):
        self.request.return_value = _response(status_code=404)
        self.assertEqual(http.status_code("http://example.com"), 404)
        self.assertFalse(http.judge_url("http://example.com"))
        self.request.return_value = _response(status_code=200)
        self.assertTrue(http.judge_url("http://example.com"))

    def test_ping(self):
        self.request.return_value = _response(elapsed_ms=125)
        self.assertEqual(http.ping("http://example.com"), 125)

    def test_post_form(self):
        http.post("http://example.com/p", {"a": "1"})
        args, kwargs = self._call()
        self.assertEqual(args[0], "POST")
        self.assertEqual(kwargs["data"], {"a": "1"})
        self.assertNotIn("json", kwargs)

    def test_post_json_params(self):
        http.post("http://example.com/p", {"a": 1}, body_type="json")
        self.assertEqual(self._call()[1]["json"], {"a": 1})

    def test_post_json_body(self):
        self.request.return_value = _response(text="created")
        self.assertEqual(http.post_json("http://example.com/p", '{"a": 1}', {"X-Test": "1"}), "created")
        kwargs = self._call()[1]
        self.assertEqual(kwargs["data"], b'{"a": 1}')
        self.assertEqual(kwargs["headers"], {"X-Test": "1", "Content-Type": "application/json"})

    def test_post_result_requires_one_body(self):
        self.assertRaises(HttpRequestError, http.post_result, "http://example.com/p")
        self.assertRaises(HttpRequestError, http.post_result, "http://example.com/p", {"a": 1}, '{"a": 1}')
        self.request.assert_not_called()

    def test_put(self):
        self.request.return_value = _response(text="updated")
        self.assertEqual(http.put("http://example.com/p", {"a": "1"}), "updated")
        args, kwargs = self._call()
        self.assertEqual(args[0], "PUT")
        self.assertEqual(kwargs["data"], {"a": "1"})

    def test_delete_uses_given_headers(self):
        http.delete("http://example.com/d", {"Authorization": "token"})
        args, kwargs = self._call()
        self.assertEqual(args[0], "DELETE")
        self.assertEqual(kwargs["headers"], {"Authorization": "token"})

    def test_upload_bytes(self):
        self.request.return_value = _response(text="uploaded")
        result = http.upload("http://example.com/u", "file", b"content", params={"k": "v"}, file_name="a.txt", content_type="text/plain")
        self.assertEqual(result, "uploaded")
        kwargs = self._call()[1]
        self.assertEqual(kwargs["files"], {"file": ("a.txt", b"content", "text/plain")})
        self.assertEqual(kwargs["data"], {"k": "v"})

    def test_upload_stream(self):
        http.upload("http://example.com/u", "file", io.BytesIO(b"streamed"))
        self.assertEqual(self._call()[1]["files"], {"file": ("file", b"streamed")})

    def test_upload_path(self):
        import tempfile
        import pathlib
        with tempfile.TemporaryDirectory() as d:
            path = pathlib.Path(d) / "report.csv"
            path.write_bytes(b"a,b\n")
            http.upload("http://example.com/u", "file", path)
        self.assertEqual(self._call()[1]["files"], {"file": ("report.csv", b"a,b\n")})

    def test_upload_missing_path(self):
        import tempfile
        import pathlib
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(HttpRequestError) as cm:
                http.upload("http://example.com/u", "file", pathlib.Path(d) / "missing.csv")
        self.assertEqual(cm.exception.obfuscated_code(), "HTTP-1001")
        self.assertFalse(cm.exception.is_recoverable)
        self.request.assert_not_called()

    def test_download(self):
        self.request.return_value = _response(raw=b"downloaded body")
        sink = io.BytesIO()
        self.assertEqual(http.download("http://example.com/f", sink), 15)
        self.assertEqual(sink.getvalue(), b"downloaded body")
        self.assertTrue(self._call()[1]["stream"])
        self.request.return_value.close.assert_called_once()

    def test_download_http_error(self):
        self.request.return_value = _response(status_code=500)
        self.request.return_value.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        with self.assertRaises(HttpRequestError) as cm:
            http.download("http://example.com/f", io.BytesIO())
        self.assertFalse(cm.exception.is_recoverable)
        self.request.return_value.close.assert_called_once()

    def test_connection_error_is_recoverable(self):
        self.request.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(HttpRequestError) as cm:
            http.get("http://example.com")
        self.assertTrue(cm.exception.is_recoverable)
        self.assertEqual(cm.exception.obfuscated_code(), "HTTP-2002")

    def test_timeout_is_recoverable(self):
        self.request.side_effect = requests.ConnectTimeout("slow")
        with self.assertRaises(HttpRequestError) as cm:
            http.get("http://example.com")
        self.assertTrue(cm.exception.is_recoverable)
        self.assertEqual(cm.exception.obfuscated_code(), "HTTP-2001")
