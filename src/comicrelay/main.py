# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the application entry point so routing and startup live in one place.

"""Comic Relay application entry point.

Run with::

    comicrelay            # uses $PORT (default 3002)
    uvicorn comicrelay.main:app
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from comicrelay.api.v1.debug import router as debug_router
from comicrelay.api.v1.generation import router as generation_router
from comicrelay.api.v1.stories import router as stories_router
from comicrelay.api.v1.system import frontend_router
from comicrelay.api.v1.system import router as system_router
from comicrelay.core.config import RelayConfig, get_config

logger = logging.getLogger(__name__)


def configure_logging(config: RelayConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Comic Relay",
        version="0.1.0",
        description="Relay for story/image generation providers and story storage.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(generation_router)
    app.include_router(stories_router)
    app.include_router(system_router)
    app.include_router(debug_router)
    # Catch-all GET; keep last.
    app.include_router(frontend_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    config = get_config()
    configure_logging(config)
    logger.info("Server running at http://localhost:%d", config.port)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
