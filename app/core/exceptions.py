class HouseholdPlannerException(Exception):
    """Base exception for household planner"""

    pass


class UnauthorizedException(HouseholdPlannerException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(HouseholdPlannerException):
    """Raised when resource not found"""

    pass


class ForbiddenException(HouseholdPlannerException):
    """Raised when the user's role or event permission does not allow the action"""

    pass


class ValidationException(HouseholdPlannerException):
    """Raised for business logic validation errors"""

    pass
