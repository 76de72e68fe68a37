"""Run feature: state manager, transport schemas, and API router."""

from .router import create_run_router
from .schemas import CompleteRequest, RunStatePayload, ShuffleRequest, StartRunRequest
from .service import RunManager, RunStatePoisoned

__all__ = [
    "CompleteRequest",
    "RunManager",
    "RunStatePayload",
    "RunStatePoisoned",
    "ShuffleRequest",
    "StartRunRequest",
    "create_run_router",
]
