"""
Job records as reported by the agent API.

Jobs belong to the server. We only ever look at a snapshot of one, decide
whether it is finished, and move on.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class JobState(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)

    @classmethod
    def parse(cls, value: Any) -> "JobState":
        """Unknown or missing states count as still running."""
        try:
            return cls(value)
        except (ValueError, TypeError):
            return cls.PENDING


@dataclass
class Job:
    id: str
    state: JobState
    result: Any = None
    error: Optional[str] = None
    thread_id: Optional[str] = None

    @classmethod
    def from_payload(cls, job_id: str, payload: dict) -> "Job":
        # Older API responses carry the answer under "response".
        result = payload.get("result")
        if result is None:
            result = payload.get("response")
        return cls(
            id=payload.get("jobId") or job_id,
            state=JobState.parse(payload.get("status")),
            result=result,
            error=payload.get("error") or None,
            thread_id=payload.get("threadId") or None,
        )


@dataclass
class CommandResult:
    text: str
    thread_id: Optional[str] = None
    job_id: Optional[str] = None
    attempts: int = 0


def render_result(value: Any) -> str:
    """Text passes through; structured results become indented JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, default=str)
