"""FastAPI application setup for the dashboard feed endpoints."""

from fastapi import FastAPI

from .api import router as api_router

app = FastAPI(title="Dashboard Feeds")

# API routes
app.include_router(api_router, prefix="/api")
