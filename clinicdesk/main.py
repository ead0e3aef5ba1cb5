from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from clinicdesk.api.api import api_router
from clinicdesk.core.config import settings
from clinicdesk.core.logger import logger
from clinicdesk.core.redis import redis_client
from clinicdesk.db.session import init_db
from clinicdesk.middleware.log_middleware import LogMiddleware

@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info(f"{settings.PROJECT_NAME} started")
    yield
    await redis_client.close()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LogMiddleware)

@app.exception_handler(SQLAlchemyError)
async def data_store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Data store error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Failed to load data"})

@app.get("/")
async def root():
    return {"message": "Welcome to ClinicDesk API"}

app.include_router(api_router, prefix=settings.API_V1_STR)
