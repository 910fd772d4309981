"""FastAPI interface for mp3drop."""

from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, File, Header, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings, load_settings
from .infrastructure.disk_staging import sweep_upload_dir
from .interfaces.api_handlers import build_upload_pipeline, read_candidate, status_code_for
from .interfaces.http_guards import FixedWindowRateLimiter, apply_security_headers
from .interfaces.search import router as search_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    if settings.sweep_on_startup:
        current = app.state.pipeline.retention_slot.current()
        sweep_upload_dir(settings.upload_dir, keep=current.path if current else None)
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="mp3drop API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.pipeline = build_upload_pipeline(settings)
    app.state.rate_limiter = FixedWindowRateLimiter(
        limit=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    @app.middleware("http")
    async def guard_requests(request: Request, call_next):
        client_key = request.client.host if request.client else "unknown"
        decision = app.state.rate_limiter.hit(client_key)
        if decision.allowed:
            response = await call_next(request)
        else:
            response = JSONResponse(
                status_code=429,
                content={"detail": {"code": "rate_limited", "message": "Too many requests, try again later."}},
                headers={"Retry-After": str(decision.retry_after_seconds)},
            )
        apply_security_headers(response.headers)
        return response

    @app.get("/health")
    def health() -> dict[str, str]:
        """Health check endpoint."""

        return {"status": "ok"}

    @app.post("/upload")
    async def upload(
        request: Request,
        mp3file: UploadFile = File(..., alias=settings.upload_field_name, description="MP3 file to publish"),
        x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
    ) -> JSONResponse:
        """Validate, sanitize and publish an MP3, replacing the previous one."""

        pipeline = request.app.state.pipeline
        correlation_id = x_correlation_id or str(uuid4())
        candidate = await read_candidate(mp3file, pipeline.policy.max_file_size_bytes)
        outcome = await run_in_threadpool(pipeline.run, candidate, correlation_id)

        if outcome.rejection is not None:
            raise HTTPException(
                status_code=status_code_for(outcome.rejection.reason),
                detail=outcome.rejection.as_dict(),
                headers={"X-Correlation-Id": correlation_id},
            )

        return JSONResponse(
            content={"filePath": outcome.published.public_path},
            headers={"X-Correlation-Id": correlation_id},
        )

    @app.get("/current")
    def current(request: Request) -> dict[str, str]:
        """Return the public path of the file currently published, if any."""

        published = request.app.state.pipeline.retention_slot.current()
        if published is None:
            raise HTTPException(status_code=404, detail={"code": "nothing_published", "message": "No file published yet."})
        return {"filePath": published.public_path}

    app.include_router(search_router)

    app.mount(
        settings.public_uploads_path,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )
    if settings.public_dir.is_dir():
        app.mount("/public", StaticFiles(directory=settings.public_dir), name="public")

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        index_path = settings.public_dir / "index.html"
        if not index_path.is_file():
            raise HTTPException(status_code=404, detail={"code": "not_found", "message": "No index page."})
        return FileResponse(index_path)

    return app


app = create_app()
