"""Customer service for the parking registry."""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.models.customer import Customer
from src.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class CustomerService:
    """Service for customer-related operations."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    def create_customer(
        self,
        name: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        is_subscriber: bool = False,
        monthly_fee: Optional[Decimal] = None,
    ) -> Customer:
        """
        Create a customer.

        Args:
            name: Display name
            phone: Contact phone; non-digit characters are dropped
            address: Postal address
            is_subscriber: Monthly subscriber flag
            monthly_fee: Fixed monthly fee (ignored by billing for non-subscribers)

        Returns:
            Created Customer

        Raises:
            ValueError: If name is empty or monthly_fee is negative
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Customer name is required")
        if monthly_fee is not None and Decimal(str(monthly_fee)) < 0:
            raise ValueError("Monthly fee cannot be negative")

        digits = "".join(ch for ch in phone or "" if ch.isdigit())
        customer = Customer(
            name=name,
            phone=digits or None,
            address=address,
            is_subscriber=is_subscriber,
            monthly_fee=Decimal(str(monthly_fee)) if monthly_fee is not None else None,
        )
        self.db.add(customer)
        self.db.commit()

        logger.info(
            "Created customer id=%d name=%s subscriber=%s fee=%s",
            customer.id,
            customer.name,
            customer.is_subscriber,
            customer.monthly_fee,
        )
        return customer

    def get_by_id(self, customer_id: int) -> Customer:
        """
        Get customer by ID.

        Raises:
            NotFoundError: If the customer does not exist
        """
        customer = self.db.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found")
        return customer

    def list_customers(self, subscribers_only: bool = False) -> list[Customer]:
        """List customers ordered by name."""
        stmt = select(Customer).order_by(Customer.name.asc())
        if subscribers_only:
            stmt = stmt.where(Customer.is_subscriber == True)  # noqa: E712
        return list(self.db.scalars(stmt).all())


__all__ = ["CustomerService"]
