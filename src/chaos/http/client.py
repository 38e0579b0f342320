"""Thin helpers for one-off HTTP requests.

    Every function makes a single request with the requests library and returns
    either the response body as text or the requests.Response itself (the *_result
    variants). When no headers are given, default_headers() is sent.
"""
import functools
import pathlib
import typing as t

import requests
import zirconium as zr
import zrlog
from autoinject import injector

from chaos.util import ChaosError, Readable, Writable, is_blank
from chaos.io import to_bytes, copy_large, close_quietly

DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_4) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/81.0.4044.129 Safari/537.36"

BODY_TYPE_FORM = "form"
BODY_TYPE_JSON = "json"


class HttpRequestError(ChaosError):
    """Error class for HTTP request failures."""

    def __init__(self, msg, code, is_recoverable: bool = False):
        super().__init__(msg, "HTTP", code, is_recoverable=is_recoverable)


def wrap_request_errors(cb):
    """Converts requests exceptions into HttpRequestErrors with recoverable set properly."""

    @functools.wraps(cb)
    def _inner(*args, **kwargs):
        try:
            return cb(*args, **kwargs)
        except requests.Timeout as ex:
            raise HttpRequestError(f"Request timed out: {ex.__class__.__name__}: {str(ex)}", 2001, True) from ex
        except requests.ConnectionError as ex:
            raise HttpRequestError(f"Connection error: {ex.__class__.__name__}: {str(ex)}", 2002, True) from ex
        except requests.RequestException as ex:
            raise HttpRequestError(f"Request failed: {ex.__class__.__name__}: {str(ex)}", 2000) from ex

    return _inner


def default_headers() -> dict[str, str]:
    return {
        "Cache-Control": "no-cache",
        "Accept": "*/*",
        "User-Agent": DEFAULT_USER_AGENT,
    }


@injector.inject
def _request(method: str, url: str, headers: t.Optional[dict] = None, config: zr.ApplicationConfig = None, **kwargs) -> requests.Response:
    timeout = (
        config.as_int(("chaos", "http", "connect_timeout"), default=10),
        config.as_int(("chaos", "http", "read_timeout"), default=30),
    )
    zrlog.get_logger("chaos.http").debug(f"{method} {url}")
    return requests.request(
        method,
        url,
        headers=default_headers() if headers is None else headers,
        timeout=timeout,
        **kwargs
    )


@wrap_request_errors
def get_result(url: str, headers: t.Optional[dict] = None) -> requests.Response:
    return _request("GET", url, headers)


def get(url: str, headers: t.Optional[dict] = None) -> str:
    return get_result(url, headers).text


def status_code(url: str) -> int:
    return get_result(url).status_code


def judge_url(url: str) -> bool:
    """Check if the URL answers with 200 OK."""
    return status_code(url) == 200


def ping(url: str) -> int:
    """Milliseconds between sending the request and receiving the response headers."""
    return int(get_result(url).elapsed.total_seconds() * 1000)


@wrap_request_errors
def post_result(url: str,
                params: t.Optional[dict] = None,
                json_body: t.Optional[str] = None,
                headers: t.Optional[dict] = None,
                body_type: t.Optional[str] = None) -> requests.Response:
    """Send either params (as a form or JSON, see body_type) or a pre-serialized JSON body."""
    if params and is_blank(json_body):
        if body_type == BODY_TYPE_JSON:
            return _request("POST", url, headers, json=params)
        return _request("POST", url, headers, data=params)
    elif not params and not is_blank(json_body):
        headers = dict(default_headers() if headers is None else headers)
        headers["Content-Type"] = "application/json"
        return _request("POST", url, headers, data=json_body.encode("utf-8"))
    raise HttpRequestError("Exactly one of params or json_body must be provided", 1000)


def post(url: str, params: dict, body_type: str = BODY_TYPE_FORM, headers: t.Optional[dict] = None) -> str:
    return post_result(url, params=params, headers=headers, body_type=body_type).text


def post_json(url: str, json_body: str, headers: t.Optional[dict] = None) -> str:
    return post_result(url, json_body=json_body, headers=headers).text


@wrap_request_errors
def put_result(url: str, params: t.Optional[dict], headers: t.Optional[dict] = None) -> requests.Response:
    return _request("PUT", url, headers, data=params)


def put(url: str, params: t.Optional[dict], headers: t.Optional[dict] = None) -> str:
    return put_result(url, params, headers).text


@wrap_request_errors
def delete_result(url: str, headers: t.Optional[dict] = None) -> requests.Response:
    return _request("DELETE", url, headers)


def delete(url: str, headers: t.Optional[dict] = None):
    delete_result(url, headers)


@wrap_request_errors
def upload(url: str,
           file_param: str,
           file: t.Union[str, pathlib.Path, bytes, Readable],
           headers: t.Optional[dict] = None,
           params: t.Optional[dict] = None,
           file_name: t.Optional[str] = None,
           content_type: t.Optional[str] = None) -> str:
    """POST a file as multipart form data under the field file_param.

        A path that cannot be read raises HttpRequestError before any request is made.
    """
    if isinstance(file, (str, pathlib.Path)):
        path = pathlib.Path(file)
        try:
            with open(path, "rb") as h:
                content = to_bytes(h)
        except OSError as ex:
            raise HttpRequestError(f"Cannot read upload file [{path}]: {ex.__class__.__name__}: {str(ex)}", 1001) from ex
        file_name = file_name or path.name
    elif isinstance(file, (bytes, bytearray)):
        content = bytes(file)
    else:
        content = to_bytes(file)
    file_name = file_name or file_param
    file_spec = (file_name, content) if content_type is None else (file_name, content, content_type)
    return _request("POST", url, headers, data=params, files={file_param: file_spec}).text


@wrap_request_errors
def download(url: str, sink: Writable, headers: t.Optional[dict] = None) -> int:
    """Stream the response body into the sink, returning the number of bytes written."""
    response = _request("GET", url, headers, stream=True)
    try:
        response.raise_for_status()
        response.raw.decode_content = True
        return copy_large(response.raw, sink)
    finally:
        close_quietly(response)
