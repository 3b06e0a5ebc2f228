"""FastAPI application entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teamcap.config import get_settings
from teamcap.database import init_db
from teamcap.engine.errors import CapacityValidationError, InvalidArgumentError
from teamcap.routers import analytics, availability, iterations, members, teams
from teamcap.utils.logger import configure_logging, get_logger

settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(
    title="Team Capacity Planning & Analytics",
    description="Iteration capacity, weekly availability, team templates and capacity analytics",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(iterations.router)
app.include_router(members.router)
app.include_router(availability.router)
app.include_router(teams.router)
app.include_router(analytics.router)


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(CapacityValidationError)
async def capacity_validation_handler(request: Request, exc: CapacityValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc), "code": exc.code})


@app.get("/health")
async def health():
    return {"status": "ok"}
