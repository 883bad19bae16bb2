"""Custom exception classes for the parking registry and billing generator.

Provides domain-specific exceptions for clear error handling and reporting.
"""


class RegistryError(Exception):
    """Base exception for customer/vehicle registry errors."""

    pass


class NotFoundError(RegistryError):
    """Referenced customer or vehicle does not exist."""

    pass


class DuplicatePlateError(RegistryError):
    """Another vehicle is already registered with this plate."""

    pass


class BillingError(Exception):
    """Base exception for billing generator errors."""

    pass


class SchemaNotReadyError(BillingError):
    """Database is missing billing tables (migrations not applied)."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = list(missing or [])


class InvalidCompetenceError(BillingError, ValueError):
    """Competence string is not a valid YYYY-MM month (caller input error)."""

    pass


class InvoicePersistenceError(BillingError):
    """Writing an invoice failed; invoices committed before the failure stand.

    Attributes:
        competence: Month being billed
        created: Invoices successfully created before the failure
    """

    def __init__(self, message: str, competence: str, created: list | None = None):
        super().__init__(message)
        self.competence = competence
        self.created = list(created or [])


class BillingCancelledError(BillingError):
    """Run aborted by its cancel token before all invoices were written."""

    def __init__(self, message: str, competence: str, created: list | None = None):
        super().__init__(message)
        self.competence = competence
        self.created = list(created or [])


__all__ = [
    "RegistryError",
    "NotFoundError",
    "DuplicatePlateError",
    "BillingError",
    "SchemaNotReadyError",
    "InvalidCompetenceError",
    "InvoicePersistenceError",
    "BillingCancelledError",
]
