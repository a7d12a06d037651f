"""Application errors surfaced to API clients as ``{code, message}``."""


class AppError(Exception):
    """Base class for errors with a stable client-facing code."""

    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "An internal server error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(AppError):
    code = "VALIDATION_ERROR"
    status_code = 422
    default_message = "The request is invalid."


class Unauthorized(AppError):
    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication is required."


class Forbidden(AppError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "You do not have permission to access this resource."


class NotFound(AppError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "The requested resource was not found."


class EmailAlreadyExists(AppError):
    code = "EMAIL_ALREADY_EXISTS"
    status_code = 400
    default_message = "This email address is already registered."


class FoodInUse(AppError):
    code = "FOOD_IN_USE"
    status_code = 400
    default_message = "This food is used by meal records and cannot be deleted."


class MissingFoods(ValidationFailed):
    """Raised when meal items reference foods the user cannot see."""

    def __init__(self, food_ids: list[int]) -> None:
        self.food_ids = food_ids
        joined = ", ".join(str(food_id) for food_id in food_ids)
        super().__init__(f"Foods not found: ID {joined}")
