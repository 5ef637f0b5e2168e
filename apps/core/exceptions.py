# apps/core/exceptions.py

from dataclasses import dataclass

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError

# --- Base Exceptions for the Core App ---

class CoreSystemException(APIException):
    """
    Base exception class for all errors originating from the backend.
    Inherits from DRF's APIException for consistent API error responses.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = _('An error occurred within the core system.')
    default_code = 'core_system_error'


@dataclass(frozen=True)
class FieldViolation:
    """A single failed rule: which field, which constraint, and the message shown to the caller."""
    field: str
    constraint: str
    message: str


class FieldValidationError(ValidationError):
    """
    Raised when an input payload breaks one or more field rules.
    Carries every violation found, not only the first one.
    """
    default_detail = _('Invalid input.')
    default_code = 'invalid'

    def __init__(self, violations):
        self.violations = list(violations)
        detail = {}
        for violation in self.violations:
            detail.setdefault(violation.field, []).append(violation.message)
        super().__init__(detail=detail, code=self.default_code)

    @property
    def fields(self):
        """Names of the offending fields, in the order they were reported."""
        seen = []
        for violation in self.violations:
            if violation.field not in seen:
                seen.append(violation.field)
        return seen


class InvalidNumericValue(CoreSystemException, ValueError):
    """
    Raised when a value cannot be turned into a finite decimal number.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _('The value is not a finite number.')
    default_code = 'invalid_numeric_value'


class StorageUniquenessViolation(CoreSystemException):
    """
    Raised when a record with the same unique key (code, symbol) already exists.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('A record with this key already exists.')
    default_code = 'duplicate_key'


class FetchFailure(CoreSystemException):
    """
    Raised (or captured as state) when a market-data read fails.
    """
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = _('Failed to fetch market data.')
    default_code = 'fetch_failure'


class MaintenanceScriptFailure(CoreSystemException):
    """
    Raised when a maintenance command cannot reach the database.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = _('Maintenance task failed.')
    default_code = 'maintenance_failure'


class ResourceNotFound(CoreSystemException):
    """
    Base for lookups that found nothing.
    """
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _('The requested resource was not found.')
    default_code = 'not_found'
