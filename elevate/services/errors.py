"""Billing error hierarchy."""


class BillingError(Exception):
    """Base billing error."""

    def __init__(self, message: str, code: str):
        """Initialize error."""
        self.message = message
        self.code = code
        super().__init__(message)


class MalformedDateError(BillingError, ValueError):
    """A start date or period date could not be interpreted."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Malformed date: {value!r}", "malformed_date")


class PersistenceError(BillingError):
    """A batch of records could not be written for a community."""

    def __init__(self, message: str = "Failed to persist billing records"):
        super().__init__(message, "persistence_failure")


class StoreUnavailableError(BillingError):
    """The store could not be reached at all; fatal for the whole run."""

    def __init__(self, message: str = "Billing store is unavailable"):
        super().__init__(message, "store_unavailable")


class CommunityNotFoundError(BillingError):
    def __init__(self, community_id: int):
        self.community_id = community_id
        super().__init__(f"Community {community_id} not found", "community_not_found")


class RecordNotFoundError(BillingError):
    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__(f"Maintenance record {record_id} not found", "record_not_found")


class PermissionDeniedError(BillingError):
    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, "permission_denied")


class InvalidTransitionError(BillingError):
    def __init__(self, message: str):
        super().__init__(message, "invalid_transition")


class OpeningBalanceLockedError(BillingError):
    def __init__(self, community_id: int):
        self.community_id = community_id
        super().__init__(
            f"Opening balance for community {community_id} is locked; request an update instead",
            "opening_balance_locked",
        )


__all__ = [
    "BillingError",
    "MalformedDateError",
    "PersistenceError",
    "StoreUnavailableError",
    "CommunityNotFoundError",
    "RecordNotFoundError",
    "PermissionDeniedError",
    "InvalidTransitionError",
    "OpeningBalanceLockedError",
]
