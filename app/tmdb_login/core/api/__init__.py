"""API package exposing the HTTP client and response decoding"""
from .api_response import decode_response
from .base_client import ApiResult, BaseAPIClient

__all__ = [
    'ApiResult',
    'BaseAPIClient',
    'decode_response',
]
