"""Domain exceptions raised by the service layer and mapped to HTTP responses by the routers."""

from fastapi import HTTPException, status


class PortalError(Exception):
    """Base class for errors with a client-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_http(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.message)


class ValidationFailed(PortalError):
    """Malformed or missing request input. Raised before any transaction work."""

    status_code = status.HTTP_400_BAD_REQUEST


class BusinessRuleViolation(PortalError):
    """Request is well formed but a placement rule rejects it."""

    status_code = status.HTTP_400_BAD_REQUEST


class ResourceNotFound(PortalError):
    """Resource is absent or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND


class OperationFailed(PortalError):
    """Unexpected failure mid-operation; the transaction was rolled back."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
