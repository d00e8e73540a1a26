from .base import BaseTransport
from .http_transport import HttpTransport
from .payloads import SchemaByIdPayload, SchemaPayload, SubjectVersionPayload

__all__ = [
    "BaseTransport",
    "HttpTransport",
    "SchemaByIdPayload",
    "SchemaPayload",
    "SubjectVersionPayload",
]
