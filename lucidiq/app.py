# lucidiq/app.py
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings
from .errors import GatewayError
from .logging_utils import setup_logging
from .service import AnalyzeRequest, ChatRequest, ProductService

logger = logging.getLogger("lucidiq.api")

ENDPOINTS = ["/api/analyze", "/api/chat"]


def create_app(settings: Optional[Settings] = None, service: Optional[ProductService] = None) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()
    if service is None:
        service = ProductService(settings)

    app = FastAPI(title="LucidIQ API", version=__version__)
    app.state.settings = settings
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GatewayError)
    async def gateway_error(request: Request, exc: GatewayError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError):
        logger.warning("[LucidIQ] Rejected body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception("[LucidIQ] Server error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"error": "Server error", "message": str(exc)})

    @app.get("/")
    def root() -> Dict[str, Any]:
        return {
            "status": "ok",
            "service": "LucidIQ API",
            "version": __version__,
            "endpoints": ENDPOINTS,
        }

    @app.get("/api")
    def api_root() -> Dict[str, Any]:
        return {"status": "ok", "message": "LucidIQ API is running"}

    @app.post("/api/analyze")
    def analyze(req: Optional[AnalyzeRequest] = None) -> Dict[str, Any]:
        return app.state.service.analyze(req if req is not None else AnalyzeRequest())

    @app.post("/api/chat")
    def chat(req: Optional[ChatRequest] = None) -> Dict[str, Any]:
        return app.state.service.chat(req if req is not None else ChatRequest())

    return app


def main() -> None:
    import uvicorn

    settings = Settings.from_env()
    setup_logging(settings.log_level)
    logger.info("[LucidIQ] Server running on port %s", settings.port)
    logger.info("[LucidIQ] Endpoints: %s", ", ".join(ENDPOINTS))
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
