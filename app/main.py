from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import TimesheetError
from app.core.logging import configure_logging
from app.models import timecard  # noqa: F401
from app.routers.timesheets import router as timesheets_router

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(
    title="Timesheets API",
    version=VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def catch_unhandled_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception(
            "Unhandled exception",
            extra={"method": request.method, "path": request.url.path},
        )
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.exception_handler(TimesheetError)
async def timesheet_error_handler(request: Request, exc: TimesheetError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(timesheets_router)


@app.get("/")
def root():
    return {"status": "Timesheets API running"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": VERSION,
    }
