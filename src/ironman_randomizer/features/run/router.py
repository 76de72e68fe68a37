from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core.shuffle import shuffle_characters
from .concurrency import run_blocking
from .schemas import CompleteRequest, RunStatePayload, ShuffleRequest, StartRunRequest
from .service import RunManager

__all__ = ["create_run_router"]


class _RunController:
    def __init__(self, manager: RunManager) -> None:
        self.manager = manager

    async def shuffle(self, body: ShuffleRequest) -> JSONResponse:
        indices = await run_blocking(shuffle_characters, body.length, body.seed)
        return JSONResponse(indices)

    async def start(self, body: StartRunRequest) -> RunStatePayload:
        state = await self.manager.start_run_async(body.characters, body.seed)
        return RunStatePayload.from_state(state)

    async def complete(self, body: CompleteRequest | None) -> RunStatePayload:
        character = body.character if body is not None else None
        state = await self.manager.complete_character_async(character)
        return RunStatePayload.from_state(state)

    async def fail(self) -> RunStatePayload:
        return RunStatePayload.from_state(await self.manager.fail_run_async())

    async def reset(self) -> RunStatePayload:
        return RunStatePayload.from_state(await self.manager.reset_run_async())

    async def current(self) -> RunStatePayload:
        return RunStatePayload.from_state(await self.manager.get_run_state_async())


def create_run_router(manager: RunManager) -> APIRouter:
    controller = _RunController(manager)
    router = APIRouter(prefix="/api/v1/run", tags=["run"])

    @router.post("/shuffle")
    async def shuffle(body: ShuffleRequest) -> JSONResponse:
        return await controller.shuffle(body)

    @router.post("/start")
    async def start_run(body: StartRunRequest) -> RunStatePayload:
        return await controller.start(body)

    @router.post("/complete")
    async def complete_character(body: CompleteRequest | None = None) -> RunStatePayload:
        return await controller.complete(body)

    @router.post("/fail")
    async def fail_run() -> RunStatePayload:
        return await controller.fail()

    @router.post("/reset")
    async def reset_run() -> RunStatePayload:
        return await controller.reset()

    @router.get("")
    async def get_run_state() -> RunStatePayload:
        return await controller.current()

    return router
