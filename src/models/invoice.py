"""Invoice ORM model for monthly subscriber billing."""

from decimal import Decimal

from sqlalchemy import Column, ForeignKey, Index, Numeric, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel

# Link table: vehicles that contributed to an invoice
invoice_vehicles = Table(
    "invoice_vehicles",
    Base.metadata,
    Column("invoice_id", ForeignKey("invoices.id"), primary_key=True),
    Column("vehicle_id", ForeignKey("vehicles.id"), primary_key=True),
)


class Invoice(Base, BaseModel):
    """
    Monthly invoice for one subscriber.

    At most one invoice exists per (customer_id, competence); the unique
    constraint backs the existence check done by the billing generator.
    Invoices are never updated by the generator after creation.
    """

    __tablename__ = "invoices"

    competence: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        index=True,
        comment="Billed month in YYYY-MM format",
    )
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Prorated amount owed for the month",
    )
    note: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    # Relationships
    customer: Mapped["Customer"] = relationship(  # noqa: F821
        "Customer",
        back_populates="invoices",
        foreign_keys=[customer_id],
    )
    vehicles: Mapped[list["Vehicle"]] = relationship(  # noqa: F821
        "Vehicle",
        secondary=invoice_vehicles,
    )

    __table_args__ = (
        UniqueConstraint("customer_id", "competence", name="uq_invoice_customer_competence"),
        Index("idx_invoice_competence_customer", "competence", "customer_id"),
    )

    @property
    def vehicle_ids(self) -> list[int]:
        return sorted(vehicle.id for vehicle in self.vehicles)

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, competence={self.competence}, "
            f"customer_id={self.customer_id}, amount={self.amount})>"
        )


__all__ = ["Invoice", "invoice_vehicles"]
