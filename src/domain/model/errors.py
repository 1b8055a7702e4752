"""Domain-level exceptions.

Services raise these errors to express rule violations.
Route handlers and the CLI catch them and map them to responses.
Transport failures never surface as exceptions; gateways return
Failed outcomes instead.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input violates a validation rule (e.g. an empty query)."""
