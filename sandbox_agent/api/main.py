import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from sandbox_agent.config import load_settings
from sandbox_agent.logging_config import configure_logging
from sandbox_agent.service import AgentService, build_service

logger = logging.getLogger(__name__)


def create_app(service_factory: Optional[Callable[[], AgentService]] = None) -> FastAPI:
    """Build the HTTP app. The agent service is created on first use."""
    configure_logging()
    app = FastAPI(title="sandbox-agent")
    factory = service_factory or (lambda: build_service(load_settings()))
    state: dict = {}

    def get_service() -> AgentService:
        if "service" not in state:
            state["service"] = factory()
        return state["service"]

    @app.get("/health")
    def health_check() -> dict:
        return {"status": "ok"}

    @app.post("/api/agent")
    async def run_agent(request: Request) -> JSONResponse:
        try:
            body = await request.json()
            prompt = body["prompt"]
            repo_url = body.get("repo_url")
            service = get_service()
            result = await run_in_threadpool(service.handle, prompt, repo_url)
        except Exception:
            logger.exception("Agent request failed path=%s", request.url.path)
            return JSONResponse({"error": "An error occurred"}, status_code=500)
        return JSONResponse({"result": result})

    return app


app = create_app()
