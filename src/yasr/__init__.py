from .cache import DualIndexCache
from .client import RegistryClient
from .config import RegistryClientConfig, load_config
from .record import SchemaRecord, SchemaReference, SchemaType, SubjectVersion
from .resolution import ResolutionEngine

__all__ = [
    "DualIndexCache",
    "RegistryClient",
    "RegistryClientConfig",
    "ResolutionEngine",
    "SchemaRecord",
    "SchemaReference",
    "SchemaType",
    "SubjectVersion",
    "load_config",
]
