"""Utility modules for REST Client."""

from .sanitizer import (
    MASK,
    is_sensitive_key,
    mask_sensitive_data,
    mask_url,
    mask_headers,
)

__all__ = [
    'MASK',
    'is_sensitive_key',
    'mask_sensitive_data',
    'mask_url',
    'mask_headers',
]
