"""Vehicle ORM model with current owner reference."""

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class Vehicle(Base, BaseModel):
    """Model representing a registered vehicle.

    customer_id always points at the current owner. Past owners live in
    VehicleAssociation rows; created_at doubles as the registration date used
    when a vehicle has no recorded association history.
    """

    __tablename__ = "vehicles"

    plate: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        unique=True,
        index=True,
        comment="Normalized plate (trimmed, upper-case)",
    )
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id"),
        nullable=False,
        index=True,
        comment="Current owning customer",
    )

    # Soft delete: removed vehicles keep their association history
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
    )

    # Relationships
    customer: Mapped["Customer"] = relationship(  # noqa: F821
        "Customer",
        back_populates="vehicles",
        foreign_keys=[customer_id],
    )
    associations: Mapped[list["VehicleAssociation"]] = relationship(  # noqa: F821
        "VehicleAssociation",
        back_populates="vehicle",
        order_by="VehicleAssociation.start_date",
    )

    def __repr__(self) -> str:
        return (
            f"<Vehicle(id={self.id}, plate={self.plate!r}, customer_id={self.customer_id}, "
            f"is_active={self.is_active})>"
        )


__all__ = ["Vehicle"]
