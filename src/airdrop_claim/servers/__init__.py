from .apps import ClaimServer
from .flows import ClaimService, setup_event_bus

__all__ = [
    "ClaimServer",
    "ClaimService",
    "setup_event_bus",
]
