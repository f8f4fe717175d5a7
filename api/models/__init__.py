"""
Models Package
Export all API models for easy imports
"""
from .proxy import (
    JiraProxyRequest,
    GeminiProxyRequest,
    ProxyErrorResponse
)

__all__ = [
    "JiraProxyRequest",
    "GeminiProxyRequest",
    "ProxyErrorResponse",
]
