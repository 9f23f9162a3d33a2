"""Advice package - holds the advice API client and its errors."""

from .api import (
    AdviceProvider,
    GeminiAdvisor,
    NullAdvisor,
    build_prompt,
    create_advisor,
)
from .errors import (
    AdviceError,
    AuthenticationError,
    ClientError,
    MissingCredentialError,
    NetworkError,
    ParseError,
    RateLimitError,
    ServerError,
)

__all__ = [
    "AdviceError",
    "AdviceProvider",
    "AuthenticationError",
    "ClientError",
    "GeminiAdvisor",
    "MissingCredentialError",
    "NetworkError",
    "NullAdvisor",
    "ParseError",
    "RateLimitError",
    "ServerError",
    "build_prompt",
    "create_advisor",
]
