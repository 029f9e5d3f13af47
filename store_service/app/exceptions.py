from __future__ import annotations


class StoreServiceError(Exception):
    """Base exception for all store-service domain errors.

    Each subclass carries the HTTP status and the stable machine-readable code
    the API layer reports back to the caller.
    """

    status_code: int = 400
    code: str = "store_error"
    default_message: str = "request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ── identity / access ─────────────────────────────────────────────


class UnauthenticatedError(StoreServiceError):
    """Missing, expired or otherwise invalid access token."""

    status_code = 401
    code = "unauthenticated"
    default_message = "not authenticated, please log in"


class UnauthorizedError(StoreServiceError):
    """Caller's role is below the role the operation requires."""

    status_code = 403
    code = "unauthorized"
    default_message = "access denied, insufficient permissions"


class UserNotFoundError(StoreServiceError):
    status_code = 404
    code = "user_not_found"
    default_message = "user not found"


class InvalidRoleError(StoreServiceError):
    code = "invalid_role"
    default_message = "invalid user role"


# ── ledger / redemption ───────────────────────────────────────────


class InsufficientCreditsError(StoreServiceError):
    """A debit would take the balance below zero. Nothing was mutated."""

    code = "insufficient_credits"
    default_message = "insufficient credits"


class RewardNotFoundError(StoreServiceError):
    status_code = 404
    code = "reward_not_found"
    default_message = "reward not found"


class RewardUnavailableError(StoreServiceError):
    """Reward is missing or switched off by an admin."""

    status_code = 404
    code = "reward_unavailable"
    default_message = "reward not found or not currently available"


class RedemptionNotFoundError(StoreServiceError):
    status_code = 404
    code = "redemption_not_found"
    default_message = "redemption request not found"


class AlreadyProcessedError(StoreServiceError):
    """Redemption already left Pending; terminal states are immutable."""

    status_code = 409
    code = "already_processed"
    default_message = "redemption was already processed"


# ── orders / catalog ──────────────────────────────────────────────


class OrderNotFoundError(StoreServiceError):
    status_code = 404
    code = "order_not_found"
    default_message = "order not found"


class ProductNotFoundError(StoreServiceError):
    status_code = 404
    code = "product_not_found"
    default_message = "product not found"


class EmptyOrderError(StoreServiceError):
    code = "empty_order"
    default_message = "order must contain items"


class InvalidQuantityError(StoreServiceError):
    code = "invalid_quantity"
    default_message = "quantity must be positive"


class InvalidStatusError(StoreServiceError):
    code = "invalid_status"
    default_message = "invalid status provided"


class InvalidTransitionError(StoreServiceError):
    status_code = 409
    code = "invalid_transition"
    default_message = "status transition is not allowed"


class AnnouncementNotFoundError(StoreServiceError):
    status_code = 404
    code = "announcement_not_found"
    default_message = "announcement not found"


class DuplicateNameError(StoreServiceError):
    status_code = 409
    code = "duplicate_name"
    default_message = "an entry with this name already exists"
