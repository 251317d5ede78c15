# logrelay/server.py
import logging
from time import perf_counter
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from logrelay import __version__
from logrelay.config import Settings
from logrelay.models import LogRequest, LogResponse
from logrelay.notifier import TelegramNotifier
from logrelay.pipeline import IngestionHandler
from logrelay.writer import LogFileWriter, PersistenceError

logger = logging.getLogger("logrelay.server")
http_logger = logging.getLogger("logrelay.http")


def build_handler(settings: Settings) -> IngestionHandler:
    notifier = TelegramNotifier(settings) if settings.notifications_enabled else None
    if notifier is None:
        logger.info("telegram_disabled reason=credentials_missing")
    return IngestionHandler(LogFileWriter(settings.log_path), notifier=notifier)


def create_app(
    settings: Optional[Settings] = None,
    handler: Optional[IngestionHandler] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    handler = handler or build_handler(settings)

    app = FastAPI(title="Log Relay", version=__version__)
    app.state.settings = settings
    app.state.handler = handler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Request tracing ----------
    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        t0 = perf_counter()
        response = await call_next(request)
        http_logger.info(
            "request method=%s path=%s status=%d latency_ms=%.1f",
            request.method,
            request.url.path,
            response.status_code,
            (perf_counter() - t0) * 1000,
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        # the rejected input is not echoed back; it may not even encode as UTF-8
        errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
        return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})

    @app.exception_handler(PersistenceError)
    async def persistence_failed(request: Request, exc: PersistenceError):
        # detail already logged by the pipeline; nothing leaks to the caller
        return Response(status_code=500)

    # ---------- Routes ----------
    @app.post("/log", response_model=LogResponse)
    async def post_log(req: LogRequest, background_tasks: BackgroundTasks):
        handled = await run_in_threadpool(handler.handle, req)
        background_tasks.add_task(handler.notify, handled.entry)
        return handled.response

    @app.get("/health", response_class=PlainTextResponse)
    def health():
        return "OK"

    return app
