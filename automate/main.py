import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from automate.config import settings
from automate.api.routes_car import router as car_router
from automate.api.routes_chat import router as chat_router
from automate.api.routes_research import router as research_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = [
        name
        for name in ("MARKETCHECK_API_KEY", "OPENAI_API_KEY", "GOOGLE_PLACES_API_KEY", "YOUTUBE_API_KEY")
        if not getattr(settings, name)
    ]
    if missing:
        logger.warning(f"Missing API keys, dependent features will degrade: {', '.join(missing)}")
    logger.info("AutoMate API started")
    yield


app = FastAPI(title="AutoMate", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exc()
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}\n{tb}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


@app.get("/health")
async def health_check():
    return {"status": "ok"}


app.include_router(car_router)
app.include_router(chat_router)
app.include_router(research_router)
