"""HTTP transport: one POST endpoint in front of the orchestrator.

The endpoint deliberately reads the raw body instead of declaring a pydantic
request model: classification (and its 400s) belongs to the core, not to
FastAPI's validation layer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

if TYPE_CHECKING:
    from prthread_core.orchestrator import WebhookOrchestrator


def create_app(orchestrator: WebhookOrchestrator, path: str = "/webhook") -> FastAPI:
    app = FastAPI(title="prthread", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.orchestrator = orchestrator

    @app.post(path)
    async def webhook(request: Request) -> JSONResponse:
        body = await request.body()
        # Store and Slack calls block; keep them off the event loop.
        result = await run_in_threadpool(request.app.state.orchestrator.handle, body)
        return JSONResponse(status_code=result.status_code, content=result.body)

    return app
