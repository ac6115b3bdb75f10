"""
Error taxonomy for the optimization pipeline.

Each error carries the HTTP status it maps to and a message that is safe to
show to API callers. Stages raise these and never retry; the FastAPI exception
handlers in ``main`` turn them into ``{"success": false, "error": ...}``.
"""

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class ListingOptimizerError(Exception):
    """Base exception for pipeline errors."""

    status_code = 500
    public_message = UNEXPECTED_ERROR_MESSAGE

    def __init__(self, message: str = ""):
        super().__init__(message or self.public_message)

    @property
    def user_message(self) -> str:
        return self.public_message


class InvalidAsin(ListingOptimizerError):
    """Raised when an ASIN does not match ^[A-Z0-9]{10}$."""

    status_code = 400
    public_message = "Invalid ASIN format. Must be 10 alphanumeric characters."

    @property
    def user_message(self) -> str:
        return str(self)


class ProductNotFound(ListingOptimizerError):
    """Raised when the page has no listing (missing title or a 404)."""

    status_code = 404
    public_message = "Product not found. Please check the ASIN and try again."


class ProductInaccessible(ListingOptimizerError):
    """Raised when Amazon denies the request or serves a robot check."""

    status_code = 403
    public_message = "Product not accessible on Amazon right now."


class FetchFailed(ListingOptimizerError):
    """Raised on transport errors, timeouts and other non-2xx responses."""

    status_code = 500
    public_message = "Failed to fetch product details from Amazon"


class OptimizationFailed(ListingOptimizerError):
    """Raised when any of the AI generation calls fails."""

    status_code = 500
    public_message = "Failed to optimize product listing with AI"


class StorageUnavailable(ListingOptimizerError):
    """Raised when the database cannot be reached."""

    status_code = 503
    public_message = "Database connection failed"
