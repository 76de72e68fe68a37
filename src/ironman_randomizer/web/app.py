from __future__ import annotations

import logging

from fastapi import FastAPI

from ..core.config import Settings, load_settings, normalise_log_level
from ..features.run import RunManager, create_run_router

logger = logging.getLogger(__name__)


def create_app(manager: RunManager | None = None) -> FastAPI:
    """Build the API around one ``RunManager``; each app owns its own run."""

    run_manager = manager if manager is not None else RunManager()
    app = FastAPI(title="Iron Man Randomizer")
    app.state.run_manager = run_manager

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(create_run_router(run_manager))
    return app


app = create_app()


def server_options(settings: Settings) -> dict[str, object]:
    """Keyword arguments for ``uvicorn.run``; the level is always one uvicorn knows."""

    return {
        "host": settings.bind,
        "port": settings.port,
        "log_level": normalise_log_level(settings.log_level).lower(),
    }


def main(settings: Settings | None = None) -> None:  # pragma: no cover - runner
    import uvicorn

    resolved = settings if settings is not None else load_settings()
    logger.info("Serving on %s:%d", resolved.bind, resolved.port)
    uvicorn.run(app, **server_options(resolved))


if __name__ == "__main__":  # pragma: no cover
    main()
