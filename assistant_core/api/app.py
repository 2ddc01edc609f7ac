"""HTTP 接入层（FastAPI）。

/ai/chat 与 /api/ai/chat 为同一个处理函数，保留两套前缀以兼容不同客户端。
"""

from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assistant_core.agents.chat_orchestrator import ChatOrchestrator
from assistant_core.api.service import build_orchestrator, run_ai_chat
from assistant_core.config.settings import Settings, settings
from assistant_core.domain.exceptions import BusinessError
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.infrastructure.ratelimit import RequestRateLimiter


async def _read_body(request: Request) -> dict:
    # 请求体宽松解析：不是 JSON 对象时按空请求处理
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def create_app(
    cfg: Optional[Settings] = None,
    orchestrator: Optional[ChatOrchestrator] = None,
    limiter: Optional[RequestRateLimiter] = None,
) -> FastAPI:
    cfg = cfg or settings
    orch = orchestrator or build_orchestrator(cfg)
    rate_limiter = limiter or RequestRateLimiter(
        window_seconds=cfg.rate_limit_window_seconds,
        max_requests=cfg.rate_limit_max_requests,
    )

    app = FastAPI(title="NexaBuild Assistant")
    app.state.orchestrator = orch
    app.state.limiter = rate_limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.allowed_origins or ["*"],
        allow_credentials=bool(cfg.allowed_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def rate_limited(request: Request) -> None:
        key = request.client.host if request.client else "unknown"
        rate_limiter.hit(key)

    @app.exception_handler(BusinessError)
    async def handle_business_error(request: Request, exc: BusinessError) -> JSONResponse:
        headers = None
        retry_after = exc.extra.get("retry_after")
        if retry_after:
            headers = {"Retry-After": str(retry_after)}
        return JSONResponse(
            status_code=exc.http_status,
            content={"error": type(exc).__name__, "message": exc.message},
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("http.unhandled_error", extra={"extra": {"path": request.url.path}})
        return JSONResponse(
            status_code=500,
            content={"error": "InternalError", "message": "Internal server error"},
        )

    async def chat(request: Request) -> Any:
        body = await _read_body(request)
        return await run_ai_chat(body.get("message"), body.get("messages"), orchestrator=orch)

    for path in ("/ai/chat", "/api/ai/chat"):
        app.add_api_route(path, chat, methods=["POST"], dependencies=[Depends(rate_limited)])

    @app.get("/health")
    async def health() -> Any:
        return {"ok": True, **orch.describe()}

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("assistant_core.api.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
