"""
FoodHub Backend - Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for every failure the order core reports.
How:   Each exception class carries a message and optional context dict, plus
       the HTTP status and machine-readable code the global handlers render.
Who:   Raised by services and the principal resolver; caught by the handlers
       registered in main.py.

Exception Hierarchy:
    FoodHubError (base)
    ├── ValidationError            → 400 validation_error
    ├── UnauthorizedError          → 401 unauthorized
    ├── ForbiddenError             → 403 forbidden
    ├── NotFoundError              → 404 not_found
    ├── UnavailableItemsError      → 400 unavailable_items
    ├── MixedProviderError         → 400 mixed_provider
    ├── InvalidTransitionError     → 400 invalid_transition
    ├── InvalidCancellationError   → 400 invalid_cancellation
    ├── EligibilityError           → 403 review_not_eligible
    ├── DuplicateReviewError       → 409 duplicate_review
    ├── MealInUseError             → 409 meal_in_use
    └── StoreError                 → 500 server_error (detail withheld)

No exception in this hierarchy is retried anywhere; each aborts the current
operation and the request session is rolled back.
"""

from typing import Any, Dict, Optional


class FoodHubError(Exception):
    """
    Base exception for all FoodHub application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional info. Returned as `details` for client errors,
                  logged only for server errors.
    """

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FoodHubError):
    """Client input failed a business-level validation rule."""

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthorizedError(FoodHubError):
    """No resolvable principal on the request."""

    status_code = 401
    error_code = "unauthorized"

    def __init__(self, message: str = "Unauthorized", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class ForbiddenError(FoodHubError):
    """Principal is suspended or its role may not perform the operation."""

    status_code = 403
    error_code = "forbidden"

    def __init__(self, message: str = "Forbidden", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class NotFoundError(FoodHubError):
    """
    Raised when a requested resource does not exist or is not owned by the caller.

    Ownership failures use this same error so the response never reveals
    whether another party's order exists.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class UnavailableItemsError(FoodHubError):
    """A requested meal does not exist, is unavailable, or its provider is inactive."""

    status_code = 400
    error_code = "unavailable_items"

    def __init__(
        self,
        missing_meal_ids: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if missing_meal_ids:
            ctx["meal_ids"] = [str(meal_id) for meal_id in missing_meal_ids]
        super().__init__(message="Some meals are unavailable or do not exist", context=ctx)


class MixedProviderError(FoodHubError):
    """An order would span meals from more than one provider."""

    status_code = 400
    error_code = "mixed_provider"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="All items in an order must be from the same provider",
            context=context,
        )


class InvalidTransitionError(FoodHubError):
    """Requested status is not reachable from the order's current status."""

    status_code = 400
    error_code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            message=f"Invalid status transition from {current} to {requested}",
            context={"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class InvalidCancellationError(FoodHubError):
    """Cancellation attempted on an order that is no longer `placed`."""

    status_code = 400
    error_code = "invalid_cancellation"

    def __init__(self, current: str):
        super().__init__(
            message="Only placed orders can be cancelled",
            context={"current": current},
        )
        self.current = current


class EligibilityError(FoodHubError):
    """Review attempted without a delivered order containing the meal."""

    status_code = 403
    error_code = "review_not_eligible"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="You can review only after a delivered order",
            context=context,
        )


class DuplicateReviewError(FoodHubError):
    """The store rejected a second review for the same (customer, meal) pair."""

    status_code = 409
    error_code = "duplicate_review"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="You already reviewed this meal", context=context)


class MealInUseError(FoodHubError):
    """A meal referenced by existing order items cannot be deleted."""

    status_code = 409
    error_code = "meal_in_use"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="This meal appears in existing orders and cannot be deleted",
            context=context,
        )


class StoreError(FoodHubError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always generic; `context` (original
    error type and message) is logged server-side and only exposed when the
    application runs in debug mode.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
