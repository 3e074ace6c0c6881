"""Domain exceptions."""


class BizRBACError(Exception):
    """Base exception for bizrbac."""

    pass


class PermissionDenied(BizRBACError):
    """User does not have permission for the requested action."""

    pass


class NotFound(BizRBACError):
    """Requested resource was not found."""

    def __init__(self, kind: str, key: str | None = None) -> None:
        super().__init__(f"{kind} not found: {key}" if key else f"{kind} not found")
        self.kind = kind
        self.key = key


class ValidationError(BizRBACError):
    """Validation failed for input data."""

    pass


class InvalidCondition(ValidationError):
    """Stored role-permission condition has an unknown or malformed shape."""

    pass


class AuthenticationRequired(BizRBACError):
    """No verified caller on the request."""

    pass


class BusinessContextMismatch(PermissionDenied):
    """Requested tenant differs from the user's tenant."""

    pass


class UserInactive(PermissionDenied):
    """User account is deactivated."""

    pass


class PermissionNotAssigned(PermissionDenied):
    """Effective role is missing or carries no binding for the permission."""

    pass


class ConditionFailed(PermissionDenied):
    """A conditional grant did not hold for the request context."""

    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(reason)
        self.kind = kind
        self.reason = reason


class ResolutionError(BizRBACError):
    """Storage failure or timeout while resolving a decision."""

    pass


class AuditWriteFailure(BizRBACError):
    """Audit entry could not be persisted. Never changes the decision."""

    pass
