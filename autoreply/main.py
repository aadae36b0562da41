# autoreply/main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from autoreply.core.config import settings, logger
from autoreply.core.exceptions import AppException
from starlette.middleware.cors import CORSMiddleware

from autoreply.api.v1.endpoints import profiles, replies
from autoreply.db.database import init_db
from autoreply.services.llm_client import ChatCompletionClient

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Actions on startup
    logger.info("Application startup...")
    await init_db() # Initialize the database (create tables)
    logger.info("Database initialized.")
    app.state.llm_client = ChatCompletionClient.from_settings(settings)
    yield
    # Actions on shutdown
    logger.info("Application shutdown...")
    await app.state.llm_client.aclose()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    # Internal details go to the log, never to the client
    logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

app.include_router(replies.router, prefix=settings.API_V1_STR + "/replies", tags=["replies"])
app.include_router(profiles.router, prefix=settings.API_V1_STR, tags=["profiles"])

@app.get("/")
async def read_root():
    return {"message": "Welcome to the Comment Auto-Reply API"}

@app.get("/health")
async def health_check():
    return {"status": "ok"}
