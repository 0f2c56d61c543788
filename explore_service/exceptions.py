"""
Service exceptions

Every exception here is rendered by the application-level handler in
``main.py`` as ``{"code": ..., "message": ...}`` with ``status`` as the HTTP
status code.
"""


class ServiceException(Exception):
    """Base exception carrying an HTTP status and an application error code"""

    def __init__(self, status: int, code: int, message: str):
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message


class ListingError(ServiceException):
    """A data operation behind a listing page failed"""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(
            status=500,
            code=500,
            message=f"{operation}: {cause}",
        )
        self.operation = operation
        self.cause = cause


class OwnerHydrationError(ListingError):
    """Owner of a listed repository could not be loaded"""

    def __init__(self, repo_id: int, cause: Exception):
        super().__init__("GetOwner", cause)
        self.repo_id = repo_id
        self.message = f"GetOwner: {repo_id}: {cause}"
        self.args = (self.message,)


class NotFoundException(ServiceException):
    """Requested page does not exist"""

    def __init__(self, message: str = "Page Not Found"):
        super().__init__(status=404, code=404, message=message)
