"""CORS policy evaluation and enforcement for ASGI applications."""

from corsguard.builder import CorsBuilder
from corsguard.engine import Decision, Denied, Preflight, Simple, evaluate
from corsguard.errors import DenialReason, PolicyConfigError
from corsguard.middleware import CORSPolicyMiddleware
from corsguard.policy import AllowedOrigins, AnyOrigin, CorsPolicy, OriginList, RequestView

__all__ = [
    "AllowedOrigins",
    "AnyOrigin",
    "CORSPolicyMiddleware",
    "CorsBuilder",
    "CorsPolicy",
    "Decision",
    "DenialReason",
    "Denied",
    "OriginList",
    "PolicyConfigError",
    "Preflight",
    "RequestView",
    "Simple",
    "evaluate",
]
