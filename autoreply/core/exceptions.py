"""
Application exceptions for hard failures.

Anything raised from here aborts a pipeline invocation and is turned into an
``{"error": ...}`` response by the handler registered in ``autoreply.main``.
Failures inside the LLM-backed services never reach this module; they are
absorbed at the service boundary.
"""


class AppException(Exception):
    """
    Base application exception.
    """

    def __init__(self, message: str, status_code: int = 400, details: str = None):
        """
        Args:
            message (str): User-facing error message
            status_code (int): HTTP status code (default: 400)
            details (str): Internal detail, logged but never returned
        """
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class SettingsNotFoundError(AppException):
    def __init__(self, user_id: str):
        super().__init__("Settings not found", status_code=404, details=f"user_id={user_id}")


class CommentNotFoundError(AppException):
    def __init__(self, comment_id: str):
        super().__init__("Comment not found", status_code=404, details=f"comment_id={comment_id}")


class CommentPersistenceError(AppException):
    def __init__(self, comment_id: str, details: str = None):
        super().__init__("Failed to generate reply", status_code=500, details=details or f"comment_id={comment_id}")


class ReplyPersistenceError(AppException):
    def __init__(self, comment_id: str, details: str = None):
        super().__init__("Failed to generate reply", status_code=500, details=details or f"comment_id={comment_id}")


class ProfileNotFoundError(AppException):
    def __init__(self, user_id: str):
        super().__init__("Profile not found", status_code=404, details=f"user_id={user_id}")


class ProfileExistsError(AppException):
    def __init__(self, user_id: str):
        super().__init__("Profile already exists", status_code=409, details=f"user_id={user_id}")
