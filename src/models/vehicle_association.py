"""Vehicle association ORM model: one interval of a vehicle belonging to a customer."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class VehicleAssociation(Base, BaseModel):
    """
    Contiguous period during which a vehicle was linked to a customer.

    Both ends are inclusive; end_date=None means the association is still open.
    Rows are append/close-only: an ownership change closes the open row with
    end_date=change date and opens a new row starting the same date.
    """

    __tablename__ = "vehicle_associations"

    vehicle_id: Mapped[int] = mapped_column(
        ForeignKey("vehicles.id"),
        nullable=False,
        index=True,
    )
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First day of the association (inclusive)",
    )
    end_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Last day of the association (inclusive), NULL while open",
    )

    # Relationships
    vehicle: Mapped["Vehicle"] = relationship(  # noqa: F821
        "Vehicle",
        back_populates="associations",
        foreign_keys=[vehicle_id],
    )
    customer: Mapped["Customer"] = relationship(  # noqa: F821
        "Customer",
        foreign_keys=[customer_id],
    )

    __table_args__ = (
        Index("idx_association_vehicle_start", "vehicle_id", "start_date"),
        Index("idx_association_customer", "customer_id"),
    )

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    def __repr__(self) -> str:
        return (
            f"<VehicleAssociation(id={self.id}, vehicle_id={self.vehicle_id}, "
            f"customer_id={self.customer_id}, start_date={self.start_date}, "
            f"end_date={self.end_date})>"
        )


__all__ = ["VehicleAssociation"]
