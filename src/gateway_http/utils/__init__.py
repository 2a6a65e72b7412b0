"""Utility modules."""

from .sanitizer import mask_sensitive_data, mask_headers, is_sensitive_key
from .user_agents import (
    sdk_version,
    core_user_agent,
    gateway_user_agent,
    paypal_user_agent,
)

__all__ = [
    "mask_sensitive_data",
    "mask_headers",
    "is_sensitive_key",
    "sdk_version",
    "core_user_agent",
    "gateway_user_agent",
    "paypal_user_agent",
]
