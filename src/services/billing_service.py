"""Monthly billing generator for subscriber customers.

Pipeline for one competence (YYYY-MM):
1. Read customers, vehicles and association history in one session
2. Normalize history (synthetic interval for vehicles without history)
3. Prorate each customer's monthly fee by vehicle-days in the month
4. Materialize one invoice per customer, skipping customers already invoiced

Runs are synchronous and not meant to be run concurrently for the same month;
the (customer_id, competence) unique constraint is the backstop if they are.
"""

import logging
import threading

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from src.models.customer import Customer
from src.models.invoice import Invoice
from src.models.vehicle import Vehicle
from src.models.vehicle_association import VehicleAssociation
from src.services.billing_period import BillingPeriod, parse_competence
from src.services.history_normalizer import NormalizedHistory, normalize_history
from src.services.invoice_materializer import InvoiceMaterializer
from src.services.proration import CustomerCharge, aggregate_charges

logger = logging.getLogger(__name__)


class BillingService:
    """Service for monthly invoice generation.

    Used by the billing API router and the generate_invoices CLI.
    """

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db
        self.materializer = InvoiceMaterializer(db)

    def load_history(self) -> NormalizedHistory:
        """Read vehicles and association rows and normalize them."""
        vehicles = self.db.scalars(select(Vehicle)).all()
        associations = self.db.scalars(
            select(VehicleAssociation).order_by(
                VehicleAssociation.vehicle_id, VehicleAssociation.start_date, VehicleAssociation.id
            )
        ).all()
        return normalize_history(associations, vehicles)

    def calculate_charges(self, period: BillingPeriod) -> dict[int, CustomerCharge]:
        """Compute per-customer prorated charges without writing anything."""
        history = self.load_history()
        customers = self.db.scalars(select(Customer)).all()
        return aggregate_charges(period, history.iter_windows(), customers)

    def generate(
        self,
        competence: str,
        cancel_event: threading.Event | None = None,
    ) -> list[Invoice]:
        """Generate invoices for every subscriber for the given month.

        Args:
            competence: Month in YYYY-MM format
            cancel_event: Optional token aborting the remaining invoice writes

        Returns:
            Newly created invoices; customers already invoiced for the month
            are skipped and not returned

        Raises:
            InvalidCompetenceError: Malformed competence (nothing is read or written)
            InvoicePersistenceError: A write failed; earlier invoices stay committed
            BillingCancelledError: cancel_event was set during the write loop
        """
        period = parse_competence(competence)
        logger.info(
            "Generating invoices for %s (%d days)", period.competence, period.days_in_month
        )

        charges = self.calculate_charges(period)
        logger.info("%d customers with charges for %s", len(charges), period.competence)

        created = self.materializer.materialize(period, charges, cancel_event=cancel_event)

        logger.info(
            "Billing %s finished: %d invoices created, %d already invoiced",
            period.competence,
            len(created),
            len(charges) - len(created),
        )
        return created

    def list_invoices(self, competence: str) -> list[Invoice]:
        """List invoices for a month ordered by customer id."""
        period = parse_competence(competence)
        stmt = (
            select(Invoice)
            .options(selectinload(Invoice.vehicles))
            .where(Invoice.competence == period.competence)
            .order_by(Invoice.customer_id.asc())
        )
        return list(self.db.scalars(stmt).all())


__all__ = ["BillingService"]
