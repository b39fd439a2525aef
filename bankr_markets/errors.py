"""
Error types raised by the Bankr client.

Everything the client can fail with derives from BankrError, so callers
can catch one type and still tell the cases apart. A timeout is not a
failure: the agent may still finish the job, so it is kept apart from
JobFailed.
"""

from typing import Optional


class BankrError(Exception):
    """Base class for all Bankr client errors."""


class StorageError(BankrError):
    """The credential store could not be read or written."""


class ExecutionError(BankrError):
    """Base class for failures of a single command execution."""


class MissingCredential(ExecutionError):
    def __init__(self, message: str = "API key not configured"):
        super().__init__(message)


class SubmissionFailed(ExecutionError):
    """The agent refused (or never received) the prompt. Never retried."""

    def __init__(self, status_code: Optional[int], body: str):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            super().__init__(f"API error: {body}")
        else:
            super().__init__(f"API error: {status_code} - {body}")


class JobFailed(ExecutionError):
    """The agent reported the job as failed."""

    DEFAULT_MESSAGE = "Job failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.DEFAULT_MESSAGE
        super().__init__(self.message)


class JobTimeout(ExecutionError):
    """Polling gave up before the job reached a terminal state."""

    def __init__(self, job_id: str, attempts: int):
        self.job_id = job_id
        self.attempts = attempts
        super().__init__(f"Job {job_id} timed out after {attempts} polls")
