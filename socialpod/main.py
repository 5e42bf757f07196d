# socialpod/main.py
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from socialpod.api import aspects, auth, notifications, photos, posts, users
from socialpod.api.errors import EndpointError, endpoint_error_handler
from socialpod.config import settings
from socialpod.database import Base, engine

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="Socialpod API", debug=settings.DEBUG)

UPLOAD_DIR = Path(settings.UPLOAD_DIR)
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount(settings.MEDIA_URL, StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.POD_URL.rstrip("/"),
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Localized plain-text bodies for API failures
app.add_exception_handler(EndpointError, endpoint_error_handler)

# API routers
app.include_router(auth.router)           # /auth/*
app.include_router(users.router)          # /api/v1/user
app.include_router(aspects.router)        # /api/v1/aspects/*
app.include_router(posts.router)          # /api/v1/posts/*
app.include_router(photos.router)         # /api/v1/photos/*
app.include_router(notifications.router)  # /api/v1/notifications/*

logger.info("Socialpod API ready (env=%s, pod=%s)", settings.APP_ENV, settings.pod_host)


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "Socialpod API is running",
        "version": "0.1",
    }
