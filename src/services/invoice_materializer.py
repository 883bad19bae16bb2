"""Invoice materialization: persist one invoice per customer and month."""

import logging
import threading

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.invoice import Invoice
from src.models.vehicle import Vehicle
from src.services.billing_period import BillingPeriod
from src.services.errors import BillingCancelledError, InvoicePersistenceError
from src.services.proration import CustomerCharge

logger = logging.getLogger(__name__)


def build_note(period: BillingPeriod) -> str:
    """Explanatory invoice note including the days-in-month basis."""
    return f"Prorated - {period.days_in_month} days basis (generated from vehicle association history)"


class InvoiceMaterializer:
    """Writes aggregated charges as Invoice rows.

    Each invoice is committed on its own. Idempotence is per customer: an
    existing invoice for (customer, competence) is skipped, and a unique
    constraint violation raised by a concurrent run is treated the same way.
    """

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def invoice_exists(self, customer_id: int, competence: str) -> bool:
        """Check whether the customer already has an invoice for the month."""
        stmt = select(Invoice.id).where(
            (Invoice.customer_id == customer_id) & (Invoice.competence == competence)
        )
        return self.db.execute(stmt).first() is not None

    def materialize(
        self,
        period: BillingPeriod,
        charges: dict[int, CustomerCharge],
        cancel_event: threading.Event | None = None,
    ) -> list[Invoice]:
        """Create invoices for all customers with a positive total.

        Args:
            period: Billing month
            charges: Output of aggregate_charges
            cancel_event: Optional token; when set, remaining writes are aborted

        Returns:
            Newly created invoices (already-invoiced customers are not included)

        Raises:
            InvoicePersistenceError: A write failed; carries invoices created so far
            BillingCancelledError: cancel_event was set; carries invoices created so far
        """
        created: list[Invoice] = []

        for customer_id in sorted(charges):
            charge = charges[customer_id]
            if charge.total <= 0:
                continue

            if cancel_event is not None and cancel_event.is_set():
                logger.warning(
                    "Billing %s cancelled after %d invoices", period.competence, len(created)
                )
                raise BillingCancelledError(
                    f"Billing run for {period.competence} cancelled",
                    competence=period.competence,
                    created=created,
                )

            if self.invoice_exists(customer_id, period.competence):
                logger.info(
                    "Customer %d already invoiced for %s, skipping",
                    customer_id,
                    period.competence,
                )
                continue

            try:
                invoice = self._insert_invoice(period, charge)
            except IntegrityError as e:
                self.db.rollback()
                if self.invoice_exists(customer_id, period.competence):
                    # Lost the race against a concurrent run
                    logger.info(
                        "Customer %d invoiced concurrently for %s, skipping",
                        customer_id,
                        period.competence,
                    )
                    continue
                raise InvoicePersistenceError(
                    f"Failed to write invoice for customer {customer_id}: {e}",
                    competence=period.competence,
                    created=created,
                ) from e
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    "Failed to write invoice for customer %d (%s): %s",
                    customer_id,
                    period.competence,
                    e,
                )
                raise InvoicePersistenceError(
                    f"Failed to write invoice for customer {customer_id}: {e}",
                    competence=period.competence,
                    created=created,
                ) from e

            created.append(invoice)
            logger.info(
                "Created invoice id=%d for customer %d (%s): amount=%s vehicles=%s",
                invoice.id,
                customer_id,
                period.competence,
                invoice.amount,
                sorted(charge.vehicle_ids),
            )

        return created

    def _insert_invoice(self, period: BillingPeriod, charge: CustomerCharge) -> Invoice:
        vehicles = list(
            self.db.scalars(select(Vehicle).where(Vehicle.id.in_(sorted(charge.vehicle_ids)))).all()
        )
        if len(vehicles) != len(charge.vehicle_ids):
            missing = charge.vehicle_ids - {vehicle.id for vehicle in vehicles}
            logger.warning(
                "Invoice for customer %d references unknown vehicles %s",
                charge.customer_id,
                sorted(missing),
            )

        invoice = Invoice(
            competence=period.competence,
            customer_id=charge.customer_id,
            amount=charge.total,
            note=build_note(period),
            vehicles=vehicles,
        )
        self.db.add(invoice)
        self.db.commit()
        return invoice


__all__ = ["InvoiceMaterializer", "build_note"]
