"""Billing API endpoints: trigger monthly invoice generation and list invoices."""

import logging
import time
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from src.services import get_db
from src.services.billing_service import BillingService
from src.services.errors import (
    BillingCancelledError,
    InvalidCompetenceError,
    InvoicePersistenceError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/billing", tags=["billing"])


class GenerateRequest(BaseModel):
    """Request payload for POST /api/billing/generate."""

    competence: str = Field(..., description="Month to bill, YYYY-MM")


class InvoiceResponse(BaseModel):
    """Response schema for a single invoice."""

    id: int
    competence: str
    customer_id: int
    amount: Decimal
    note: str | None = None
    vehicle_ids: list[int]

    model_config = ConfigDict(from_attributes=True)


class GenerateResponse(BaseModel):
    """Response schema for POST /api/billing/generate."""

    competence: str
    created: list[InvoiceResponse]


class InvoicesResponse(BaseModel):
    """Response schema for GET /api/billing/invoices."""

    competence: str
    invoices: list[InvoiceResponse]


@router.post("/generate", response_model=GenerateResponse, status_code=201)
def generate_invoices(
    payload: GenerateRequest,
    db: Session = Depends(get_db),  # noqa: B008
) -> GenerateResponse:
    """Generate invoices for all subscribers for a month.

    Idempotent per customer: a second call for the same month creates nothing.

    Raises:
        400: Invalid competence
        500: Persistence failure (detail lists invoices created before it)
    """
    start_time = time.time()
    service = BillingService(db)
    try:
        created = service.generate(payload.competence)
    except InvalidCompetenceError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except (InvoicePersistenceError, BillingCancelledError) as e:
        logger.error("billing.generate failed for %s: %s", payload.competence, e)
        raise HTTPException(
            status_code=500,
            detail={
                "message": "Invoice generation failed",
                "competence": e.competence,
                "created_invoice_ids": [invoice.id for invoice in e.created],
            },
        ) from e

    response = GenerateResponse(
        competence=payload.competence.strip(),
        created=[InvoiceResponse.model_validate(invoice) for invoice in created],
    )
    logger.debug(
        "billing.generate: competence=%s created=%d duration_ms=%d",
        payload.competence,
        len(created),
        int((time.time() - start_time) * 1000),
    )
    return response


@router.get("/invoices", response_model=InvoicesResponse)
def list_invoices(
    competence: str = Query(..., description="Month, YYYY-MM"),  # noqa: B008
    db: Session = Depends(get_db),  # noqa: B008
) -> InvoicesResponse:
    """List invoices already generated for a month."""
    try:
        invoices = BillingService(db).list_invoices(competence)
    except InvalidCompetenceError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return InvoicesResponse(
        competence=competence.strip(),
        invoices=[InvoiceResponse.model_validate(invoice) for invoice in invoices],
    )


__all__ = ["router"]
