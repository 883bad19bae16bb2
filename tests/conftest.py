"""Pytest configuration and shared fixtures."""

import os
from datetime import date, datetime, time, timezone
from decimal import Decimal

# Set test database URL BEFORE any imports from src
# This ensures the module-level engine never touches a real database
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.models import Base, Customer, Vehicle, VehicleAssociation  # noqa: E402


@pytest.fixture
def db_session():
    """Create test database session on a fresh in-memory database."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def make_customer(db_session):
    """Factory for persisted customers (subscribers by default)."""

    def _make(name: str, fee: str | None = "300.00", is_subscriber: bool = True) -> Customer:
        customer = Customer(
            name=name,
            is_subscriber=is_subscriber,
            monthly_fee=Decimal(fee) if fee is not None else None,
        )
        db_session.add(customer)
        db_session.commit()
        return customer

    return _make


@pytest.fixture
def make_vehicle(db_session):
    """Factory for persisted vehicles created on a given date, without history."""

    def _make(plate: str, customer: Customer, created_on: date) -> Vehicle:
        vehicle = Vehicle(
            plate=plate,
            customer_id=customer.id,
            created_at=datetime.combine(created_on, time(9, 30), tzinfo=timezone.utc),
        )
        db_session.add(vehicle)
        db_session.commit()
        return vehicle

    return _make


@pytest.fixture
def make_association(db_session):
    """Factory for recorded association intervals."""

    def _make(
        vehicle: Vehicle,
        customer: Customer,
        start: date,
        end: date | None = None,
    ) -> VehicleAssociation:
        association = VehicleAssociation(
            vehicle_id=vehicle.id,
            customer_id=customer.id,
            start_date=start,
            end_date=end,
        )
        db_session.add(association)
        db_session.commit()
        return association

    return _make
