from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.endpoints import conditions, questions, responses, surveys
from .core.config import LOG_LEVEL, SQL_ECHO, allowed_origins
from .core.logging import get_logger, setup_logging
from .database import create_db_and_tables, engine

setup_logging(LOG_LEVEL, sql_echo=SQL_ECHO)
logger = get_logger(__name__)


# --- Lifecycle events ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting...")
    await create_db_and_tables()
    yield
    logger.info("Application shutting down...")
    await engine.dispose()


# --- FastAPI app instance ---
app = FastAPI(title="Conditional Survey Backend", lifespan=lifespan)

# --- CORS middleware (needed for the survey frontend) ---
origins = allowed_origins()
logger.info("CORS: allowed origins %s", origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers ---
app.include_router(surveys.router, prefix="/api/surveys", tags=["surveys"])
app.include_router(questions.router, prefix="/api/questions", tags=["questions"])
app.include_router(conditions.router, prefix="/api/conditions", tags=["conditions"])
app.include_router(responses.router, prefix="/api/responses", tags=["responses"])


@app.get("/")
async def read_root():
    return {"message": "Conditional survey backend is running"}


@app.get("/api/health")
async def health():
    return {"status": "ok"}
