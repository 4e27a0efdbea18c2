# /app/core/exceptions.py

"""
Business errors raised by the service layer.

Every class derives from `ValueError`, so routers can keep the simple
`except ValueError as e` translation into a `{"success": False, "message": ...}`
payload. The subclasses exist so callers (and tests) can tell the failure
categories apart without parsing messages.
"""


class ExamPortalError(ValueError):
    """Base class for all expected, user-facing failures."""


class NotFoundError(ExamPortalError):
    """A user, upload or response that was asked for does not exist."""


class PreconditionError(ExamPortalError):
    """The operation is valid, but the current state does not allow it."""


class ExamDisabledError(PreconditionError):
    def __init__(self, message: str = "Exam is disabled by admin"):
        super().__init__(message)


class InsufficientQuestionPoolError(PreconditionError):
    def __init__(self, subject: str, needed: int, available: int):
        self.subject = subject
        self.needed = needed
        self.available = available
        super().__init__(f"Not enough questions for {subject} (need {needed}, have {available})")


class AlreadySubmittedError(PreconditionError):
    def __init__(self, subject: str):
        self.subject = subject
        super().__init__(f"Exam for {subject} has already been submitted")


class SubmissionFailedError(ExamPortalError):
    """The submit transaction was rolled back; nothing was recorded."""
