import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import FRONTEND_URL, LOG_LEVEL
from .database import Base, engine
from .domain.customers.router import equipment_router
from .domain.customers.router import router as customers_router
from .domain.groups.router import router as groups_router
from .domain.insights.router import router as insights_router
from .domain.jobs.router import router as jobs_router
from .domain.scheduling.router import router as schedule_router
from .exceptions import GatewayError
from .routes.notifications import router as notifications_router
from .services.workspace import get_workspace

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")

    workspace = app.dependency_overrides.get(get_workspace, get_workspace)()
    try:
        await workspace.refresh_all()
        logger.info(
            f"📊 Loaded {len(workspace.customers)} customers, {len(workspace.jobs)} jobs, "
            f"{len(workspace.groups)} groups, {len(workspace.equipment)} equipment"
        )
    except GatewayError as e:
        logger.warning(f"⚠️ Initial load failed, collections load on first request: {e}")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="LawnLedger API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


@app.exception_handler(GatewayError)
async def gateway_exception_handler(request: Request, exc: GatewayError):
    """Persistence failures that escaped a board (e.g. the first collection load)"""
    logger.error(f"❌ Gateway error on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": f"Failed to {exc.operation}"})


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raw exception object, which JSONResponse cannot encode
    return [{key: value for key, value in error.items() if key != "ctx"} for error in exc.errors()]


ALLOWED_ORIGINS = [FRONTEND_URL, "http://localhost:5173", "http://localhost:3000"]
ALLOWED_ORIGINS = list(dict.fromkeys(ALLOWED_ORIGINS))

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(customers_router)
app.include_router(equipment_router)
app.include_router(schedule_router)
app.include_router(groups_router)
app.include_router(jobs_router)
app.include_router(insights_router)
app.include_router(notifications_router)


@app.get("/health")
def health():
    return {"status": "healthy"}
