"""Customer ORM model for parking clients, including monthly subscribers."""

from decimal import Decimal

from sqlalchemy import Boolean, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class Customer(Base, BaseModel):
    """
    Parking customer.

    Subscribers (is_subscriber=True) pay a fixed monthly_fee which is prorated
    per vehicle-day by the billing generator. A non-subscriber's monthly_fee is
    ignored even when set.
    """

    __tablename__ = "customers"

    # Identity and contact fields
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Customer display name",
    )
    phone: Mapped[str | None] = mapped_column(
        String(30),
        nullable=True,
        comment="Contact phone (digits only)",
    )
    address: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    # Subscription
    is_subscriber: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        index=True,
        comment="Monthly subscriber, billed by the monthly generator",
    )
    monthly_fee: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="Fixed monthly fee (only meaningful for subscribers)",
    )

    # Relationships
    vehicles: Mapped[list["Vehicle"]] = relationship(  # noqa: F821
        "Vehicle",
        back_populates="customer",
        foreign_keys="Vehicle.customer_id",
    )
    invoices: Mapped[list["Invoice"]] = relationship(  # noqa: F821
        "Invoice",
        back_populates="customer",
        foreign_keys="Invoice.customer_id",
    )

    __table_args__ = (Index("idx_customer_name_phone", "name", "phone"),)

    def __repr__(self) -> str:
        return (
            f"<Customer(id={self.id}, name={self.name!r}, "
            f"is_subscriber={self.is_subscriber}, monthly_fee={self.monthly_fee})>"
        )


__all__ = ["Customer"]
