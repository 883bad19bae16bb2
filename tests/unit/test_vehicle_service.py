"""Unit tests for vehicle registration and association history writes."""

from datetime import date

import pytest

from src.services.customer_service import CustomerService
from src.services.errors import DuplicatePlateError, NotFoundError, RegistryError
from src.services.vehicle_service import VehicleService, normalize_plate


@pytest.fixture
def customers(db_session):
    service = CustomerService(db_session)
    alice = service.create_customer("Alice", is_subscriber=True, monthly_fee="200.00")
    bob = service.create_customer("Bob", is_subscriber=True, monthly_fee="150.00")
    return alice, bob


class TestRegisterVehicle:
    """Tests for VehicleService.register_vehicle."""

    def test_register_opens_first_interval(self, db_session, customers):
        alice, _ = customers
        service = VehicleService(db_session)

        vehicle = service.register_vehicle(" abc 1d23 ", alice.id, registered_on=date(2024, 2, 10))

        assert vehicle.plate == "ABC1D23"
        assert vehicle.created_at.date() == date(2024, 2, 10)
        (association,) = service.get_history(vehicle.id)
        assert association.customer_id == alice.id
        assert association.start_date == date(2024, 2, 10)
        assert association.end_date is None
        assert association.is_open

    def test_duplicate_plate_rejected(self, db_session, customers):
        alice, bob = customers
        service = VehicleService(db_session)
        service.register_vehicle("ABC1D23", alice.id)

        with pytest.raises(DuplicatePlateError):
            service.register_vehicle("abc1d23", bob.id)

    def test_unknown_customer_rejected(self, db_session):
        with pytest.raises(NotFoundError):
            VehicleService(db_session).register_vehicle("ABC1D23", 999)

    def test_empty_plate_rejected(self, db_session, customers):
        with pytest.raises(ValueError):
            VehicleService(db_session).register_vehicle("   ", customers[0].id)


class TestChangeOwner:
    """Tests for VehicleService.change_owner."""

    def test_closes_old_interval_and_opens_new_on_same_date(self, db_session, customers):
        alice, bob = customers
        service = VehicleService(db_session)
        vehicle = service.register_vehicle("ABC1D23", alice.id, registered_on=date(2024, 1, 1))

        service.change_owner(vehicle.id, bob.id, changed_on=date(2024, 3, 11))

        old, new = service.get_history(vehicle.id)
        assert (old.customer_id, old.start_date, old.end_date) == (
            alice.id,
            date(2024, 1, 1),
            date(2024, 3, 11),
        )
        assert (new.customer_id, new.start_date, new.end_date) == (bob.id, date(2024, 3, 11), None)
        assert vehicle.customer_id == bob.id

    def test_same_owner_is_noop(self, db_session, customers):
        alice, _ = customers
        service = VehicleService(db_session)
        vehicle = service.register_vehicle("ABC1D23", alice.id, registered_on=date(2024, 1, 1))

        service.change_owner(vehicle.id, alice.id, changed_on=date(2024, 3, 11))

        assert len(service.get_history(vehicle.id)) == 1

    def test_same_owner_without_history_writes_nothing(self, db_session, customers, make_vehicle):
        alice, _ = customers
        vehicle = make_vehicle("OLD0002", alice, date(2024, 1, 1))
        service = VehicleService(db_session)

        assert service.change_owner(vehicle.id, alice.id, changed_on=date(2024, 3, 11)) is None

        assert service.get_history(vehicle.id) == []
        assert vehicle.customer_id == alice.id

    def test_vehicle_without_history_gets_implied_interval_recorded(
        self, db_session, customers, make_vehicle
    ):
        alice, bob = customers
        vehicle = make_vehicle("OLD0001", alice, date(2023, 6, 1))
        service = VehicleService(db_session)

        service.change_owner(vehicle.id, bob.id, changed_on=date(2024, 1, 15))

        old, new = service.get_history(vehicle.id)
        assert (old.customer_id, old.start_date, old.end_date) == (
            alice.id,
            date(2023, 6, 1),
            date(2024, 1, 15),
        )
        assert (new.customer_id, new.start_date) == (bob.id, date(2024, 1, 15))

    def test_change_before_current_interval_start_rejected(self, db_session, customers):
        alice, bob = customers
        service = VehicleService(db_session)
        vehicle = service.register_vehicle("ABC1D23", alice.id, registered_on=date(2024, 3, 1))

        with pytest.raises(RegistryError):
            service.change_owner(vehicle.id, bob.id, changed_on=date(2024, 2, 1))

    def test_removed_vehicle_cannot_change_owner(self, db_session, customers):
        alice, bob = customers
        service = VehicleService(db_session)
        vehicle = service.register_vehicle("ABC1D23", alice.id, registered_on=date(2024, 1, 1))
        service.remove_vehicle(vehicle.id, removed_on=date(2024, 2, 1))

        with pytest.raises(RegistryError):
            service.change_owner(vehicle.id, bob.id)


class TestRemoveVehicle:
    """Tests for VehicleService.remove_vehicle."""

    def test_remove_closes_interval_and_keeps_row(self, db_session, customers):
        alice, _ = customers
        service = VehicleService(db_session)
        vehicle = service.register_vehicle("ABC1D23", alice.id, registered_on=date(2024, 1, 1))

        service.remove_vehicle(vehicle.id, removed_on=date(2024, 2, 5))

        assert service.get_by_id(vehicle.id).is_active is False
        (association,) = service.get_history(vehicle.id)
        assert association.end_date == date(2024, 2, 5)


def test_normalize_plate():
    assert normalize_plate(" abc-1d 23 ") == "ABC-1D23"
    assert normalize_plate(None) == ""
