from .client import HttpRequestError
