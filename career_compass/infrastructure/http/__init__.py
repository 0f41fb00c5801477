"""HTTP infrastructure package."""

from .request_builder import RequestBuilder, build_url, encode_query, merge_headers
from .transport import HttpxTransport
from .normalizer import normalize_response
from .retry import RetryPolicy, backoff_delay, retry_async

__all__ = [
    'RequestBuilder',
    'build_url',
    'encode_query',
    'merge_headers',
    'HttpxTransport',
    'normalize_response',
    'RetryPolicy',
    'backoff_delay',
    'retry_async',
]
