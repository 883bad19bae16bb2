"""FastAPI application for the parking billing service."""

import logging

from fastapi import FastAPI

from src.api.billing import router as billing_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Parking Billing",
    description="Monthly prorated billing for parking subscribers",
    version="0.1.0",
)

app.include_router(billing_router)


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint for monitoring."""
    return {"status": "ok"}


__all__ = ["app"]
