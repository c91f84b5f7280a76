"""Domain errors raised by the service layer and mapped to HTTP responses in main."""


class BillingServiceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BillingServiceError):
    status_code = 404


class InsufficientCreditsError(BillingServiceError):
    status_code = 400

    def __init__(self, required, available):
        super().__init__(
            f"Insufficient credits. Required: {required}, available: {available}. "
            "Add credits to continue."
        )
        self.required = required
        self.available = available


class InvalidTransitionError(BillingServiceError):
    status_code = 409


class ValidationError(BillingServiceError):
    status_code = 422
