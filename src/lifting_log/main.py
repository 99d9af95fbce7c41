"""Main FastAPI application."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lifting_log.api.routes import router
from lifting_log.config import settings

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title="Lifting Log Compiler")

# Configure CORS to allow requests from the dashboard
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:3001"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
