"""Vehicle registry service and association history writer.

Every ownership event is recorded as a VehicleAssociation interval:
- registering a vehicle opens an interval on the registration date
- changing owner closes the open interval on the change date and opens a new
  one starting the same date
- removing a vehicle closes the open interval and deactivates the vehicle

Intervals are never deleted; billing reads them back through the normalizer.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.models.vehicle import Vehicle
from src.models.vehicle_association import VehicleAssociation
from src.services.customer_service import CustomerService
from src.services.errors import DuplicatePlateError, NotFoundError, RegistryError
from src.services.history_normalizer import creation_date

logger = logging.getLogger(__name__)


def normalize_plate(plate: str) -> str:
    """Trim and upper-case a plate; format validation is out of scope."""
    return "".join((plate or "").split()).upper()


class VehicleService:
    """Service for vehicle registration and ownership changes."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db
        self.customers = CustomerService(db)

    def get_by_id(self, vehicle_id: int) -> Vehicle:
        """
        Get vehicle by ID.

        Raises:
            NotFoundError: If the vehicle does not exist
        """
        vehicle = self.db.get(Vehicle, vehicle_id)
        if vehicle is None:
            raise NotFoundError(f"Vehicle {vehicle_id} not found")
        return vehicle

    def register_vehicle(
        self,
        plate: str,
        customer_id: int,
        model: Optional[str] = None,
        year: Optional[int] = None,
        registered_on: Optional[date] = None,
    ) -> Vehicle:
        """
        Register a vehicle and open its first association interval.

        Args:
            plate: Vehicle plate (normalized before storing)
            customer_id: Owning customer
            model: Vehicle model
            year: Model year
            registered_on: Registration date (default: today)

        Returns:
            Created Vehicle

        Raises:
            ValueError: If plate is empty
            NotFoundError: If the customer does not exist
            DuplicatePlateError: If the plate is already registered
        """
        normalized = normalize_plate(plate)
        if not normalized:
            raise ValueError("Plate is required")

        self.customers.get_by_id(customer_id)

        existing = self.db.scalars(select(Vehicle).where(Vehicle.plate == normalized)).first()
        if existing is not None:
            raise DuplicatePlateError(f"Plate {normalized} already registered")

        registered_on = registered_on or date.today()
        vehicle = Vehicle(
            plate=normalized,
            model=model,
            year=year,
            customer_id=customer_id,
            created_at=datetime.combine(registered_on, time.min, tzinfo=timezone.utc),
        )
        self.db.add(vehicle)
        self.db.flush()

        self.db.add(
            VehicleAssociation(
                vehicle_id=vehicle.id,
                customer_id=customer_id,
                start_date=registered_on,
            )
        )
        self.db.commit()

        logger.info(
            "Registered vehicle id=%d plate=%s for customer %d on %s",
            vehicle.id,
            vehicle.plate,
            customer_id,
            registered_on,
        )
        return vehicle

    def get_history(self, vehicle_id: int) -> list[VehicleAssociation]:
        """Association intervals of a vehicle ordered by start date."""
        stmt = (
            select(VehicleAssociation)
            .where(VehicleAssociation.vehicle_id == vehicle_id)
            .order_by(VehicleAssociation.start_date.asc(), VehicleAssociation.id.asc())
        )
        return list(self.db.scalars(stmt).all())

    def change_owner(
        self,
        vehicle_id: int,
        new_customer_id: int,
        changed_on: Optional[date] = None,
    ) -> Optional[VehicleAssociation]:
        """
        Move a vehicle to another customer.

        The open interval is closed with end_date=changed_on and a new one is
        opened with start_date=changed_on. A vehicle without any recorded
        history first gets its implied interval (creation date to changed_on)
        written so the previous owner's period is not lost.

        Moving a vehicle to its current owner writes nothing.

        Returns:
            The association that is open after the call, or None when the
            owner is unchanged and the vehicle has no recorded history

        Raises:
            NotFoundError: If vehicle or customer does not exist
            RegistryError: If the vehicle was removed or changed_on precedes
                the start of the current association
        """
        vehicle = self.get_by_id(vehicle_id)
        if not vehicle.is_active:
            raise RegistryError(f"Vehicle {vehicle_id} was removed")
        self.customers.get_by_id(new_customer_id)

        changed_on = changed_on or date.today()
        history = self.get_history(vehicle_id)
        open_associations = [a for a in history if a.is_open]

        if vehicle.customer_id == new_customer_id:
            logger.debug("Vehicle %d already owned by customer %d", vehicle_id, new_customer_id)
            return open_associations[-1] if open_associations else None

        self._close_history(vehicle, history, open_associations, changed_on)

        association = VehicleAssociation(
            vehicle_id=vehicle.id,
            customer_id=new_customer_id,
            start_date=changed_on,
        )
        self.db.add(association)
        previous_customer_id = vehicle.customer_id
        vehicle.customer_id = new_customer_id
        self.db.commit()

        logger.info(
            "Vehicle %d moved from customer %d to customer %d on %s",
            vehicle_id,
            previous_customer_id,
            new_customer_id,
            changed_on,
        )
        return association

    def remove_vehicle(self, vehicle_id: int, removed_on: Optional[date] = None) -> Vehicle:
        """
        Deactivate a vehicle and close its open association on removed_on.

        The row is kept so invoices and history keep pointing at it.
        """
        vehicle = self.get_by_id(vehicle_id)
        if not vehicle.is_active:
            return vehicle

        removed_on = removed_on or date.today()
        history = self.get_history(vehicle_id)
        open_associations = [a for a in history if a.is_open]
        self._close_history(vehicle, history, open_associations, removed_on)

        vehicle.is_active = False
        self.db.commit()

        logger.info("Removed vehicle %d (plate=%s) on %s", vehicle_id, vehicle.plate, removed_on)
        return vehicle

    def _close_history(
        self,
        vehicle: Vehicle,
        history: list[VehicleAssociation],
        open_associations: list[VehicleAssociation],
        closed_on: date,
    ) -> None:
        if not history:
            created_on = creation_date(vehicle.created_at)
            if closed_on < created_on:
                raise RegistryError(
                    f"Date {closed_on} precedes creation {created_on} of vehicle {vehicle.id}"
                )
            self.db.add(
                VehicleAssociation(
                    vehicle_id=vehicle.id,
                    customer_id=vehicle.customer_id,
                    start_date=created_on,
                    end_date=closed_on,
                )
            )
            return

        for association in open_associations:
            if closed_on < association.start_date:
                raise RegistryError(
                    f"Date {closed_on} precedes association start {association.start_date} "
                    f"for vehicle {vehicle.id}"
                )
        for association in open_associations:
            association.end_date = closed_on


__all__ = ["VehicleService", "normalize_plate"]
