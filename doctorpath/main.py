"""
DoctorPath AI - FastAPI Application

Main entry point. Wires the routers for:
- Authentication and profiles
- Hospital / doctor directory
- Doctor requests and the access gate
- Cancer risk calculator
- Medical files, cases, AI generation and PDF export
"""
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Expose .env to libraries that read os.environ directly
load_dotenv()

from doctorpath.config import settings
from doctorpath.db import SessionLocal, Storage, engine, init_db
from doctorpath.db.seed import seed_database
from doctorpath.models.common import HealthResponse
from doctorpath.routes import ROUTERS
from doctorpath.routes.deps import get_assistant
from doctorpath.utils import DoctorPathError, get_logger, setup_logging

setup_logging(settings.log_level, settings.log_file)
logger = get_logger(__name__)

START_TIME = datetime.now()


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, seed demo data and prepare the upload directory."""
    init_db()
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    with SessionLocal() as db:
        removed = Storage(db).purge_expired_sessions()
        if removed:
            logger.info(f"Purged {removed} expired session(s)")
        if settings.seed_demo_data:
            seed_database(db)

    logger.info(f"{settings.app_name} ready to accept requests")
    yield
    engine.dispose()
    logger.info(f"{settings.app_name} shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title=settings.app_name,
    description="Oncology support portal: risk scoring, doctor requests, cases and AI treatment planning",
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DoctorPathError)
async def doctorpath_error_handler(request: Request, exc: DoctorPathError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "INTERNAL_ERROR", "message": "Server error", "details": {}},
    )


for router in ROUTERS:
    app.include_router(router)


# ---- Health ----

def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=settings.version,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
        database=engine.url.get_backend_name(),
        llm_available=get_assistant().is_available,
    )


@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return _health()


def main():
    import uvicorn

    uvicorn.run("doctorpath.main:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    main()
