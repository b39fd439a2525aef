"""
Agent job client.

Turns one natural-language instruction into one final answer:

1. Read the API key (every call, it may have changed)
2. POST the prompt, get a job id back
3. Sleep, poll, repeat until the job completes, fails, or we give up

Submitting is never retried. A retry could place the same bet twice.
Polling is a read, so a bad poll is skipped and the next one tries again.
"""

import asyncio
import json
import logging
from typing import Awaitable, Callable, Optional

import aiohttp

from bankr_markets.config import APIConfig
from bankr_markets.credentials import CredentialStore
from bankr_markets.errors import JobFailed, JobTimeout, MissingCredential, SubmissionFailed
from bankr_markets.jobs.backoff import ExponentialBackoff, PollPolicy
from bankr_markets.jobs.models import CommandResult, Job, JobState, render_result

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class AgentClient:
    """
    Client for the Bankr agent API.

    Holds no per-job state, so any number of execute_command calls can run
    at once on the same client. Cancel the task running one of them to stop
    its polling; the remote job keeps going regardless.
    """

    PROMPT_PATH = "/agent/prompt"
    JOB_PATH = "/agent/job/{job_id}"

    def __init__(self, credentials: CredentialStore,
                 api_config: Optional[APIConfig] = None,
                 policy: Optional[PollPolicy] = None,
                 session: Optional[aiohttp.ClientSession] = None,
                 sleep: Sleep = asyncio.sleep):
        self.credentials = credentials
        self.api_config = api_config or APIConfig()
        self.policy = policy or ExponentialBackoff()
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.api_config.request_timeout),
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    def _url(self, path: str) -> str:
        return self.api_config.base_url.rstrip("/") + path

    def _headers(self, api_key: str) -> dict:
        return {self.api_config.api_key_header: api_key}

    async def execute_command(self, prompt: str,
                              thread_id: Optional[str] = None) -> CommandResult:
        """
        Run a prompt to completion and return the agent's answer as text.

        Raises MissingCredential, SubmissionFailed, JobFailed or JobTimeout.
        """
        api_key = self.credentials.get()
        if not api_key:
            raise MissingCredential()

        job_id = await self.submit_prompt(api_key, prompt, thread_id)

        attempts = 0
        for attempts, delay in enumerate(self.policy.delays(), start=1):
            await self._sleep(delay)

            job = await self.fetch_job(api_key, job_id)
            if job is None:
                continue

            if job.state == JobState.COMPLETED:
                logger.info("Job %s completed after %d polls", job_id, attempts)
                return CommandResult(
                    text=render_result(job.result),
                    thread_id=job.thread_id,
                    job_id=job_id,
                    attempts=attempts,
                )

            if job.state == JobState.FAILED:
                logger.info("Job %s failed after %d polls: %s", job_id, attempts, job.error)
                raise JobFailed(job.error)

            logger.debug("Job %s still %s (poll %d)", job_id, job.state.value, attempts)

        raise JobTimeout(job_id, attempts)

    async def submit_prompt(self, api_key: str, prompt: str,
                            thread_id: Optional[str] = None) -> str:
        """POST the prompt once. Returns the job id."""
        body = {"prompt": prompt}
        if thread_id:
            body["threadId"] = thread_id

        try:
            async with self.session.post(
                self._url(self.PROMPT_PATH),
                json=body,
                headers=self._headers(api_key),
            ) as response:
                text = await response.text(errors="replace")
                if response.status >= 400:
                    raise SubmissionFailed(response.status, text)
                try:
                    data = json.loads(text)
                except ValueError:
                    raise SubmissionFailed(response.status, text)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SubmissionFailed(None, str(e) or e.__class__.__name__) from e

        job_id = data.get("jobId") if isinstance(data, dict) else None
        if not job_id:
            raise SubmissionFailed(response.status, text)

        logger.info("Submitted job %s: %s", job_id, prompt[:80])
        return job_id

    async def fetch_job(self, api_key: str, job_id: str) -> Optional[Job]:
        """
        GET the job's current state.

        Returns None when the poll itself went wrong (bad status, dropped
        connection, garbage body). The caller just polls again.
        """
        try:
            async with self.session.get(
                self._url(self.JOB_PATH.format(job_id=job_id)),
                headers=self._headers(api_key),
            ) as response:
                if response.status >= 400:
                    logger.warning("Poll for job %s returned HTTP %d", job_id, response.status)
                    return None
                data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning("Poll for job %s failed: %s", job_id, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Poll for job %s returned unexpected body", job_id)
            return None

        return Job.from_payload(job_id, data)
