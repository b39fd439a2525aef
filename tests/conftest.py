"""Shared fixtures: a scriptable stand-in for the Bankr agent API."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from bankr_markets.config import APIConfig
from bankr_markets.credentials import InMemoryCredentialStore
from bankr_markets.jobs.backoff import ExponentialBackoff
from bankr_markets.jobs.client import AgentClient

API_KEY = "bk_test_0123456789abcdef"


class FakeAgentAPI:
    """
    In-process agent API.

    Each prompt maps to a script: a list of poll responses, each either a
    JSON dict or list, an int HTTP status for a failed poll, or a str
    sent as a raw non-JSON body. The last entry repeats once the script
    runs out.
    """

    def __init__(self):
        self.scripts: dict[str, list] = {}
        self.default_script: list = [{"status": "completed", "result": "ok"}]
        self.submit_status: int | None = None
        self.submit_body: str | bytes = "boom"
        self.submissions: list[dict] = []
        self.polls: list[str] = []
        self.headers: list[dict] = []
        self._jobs: dict[str, list] = {}

    def script(self, prompt: str, *responses):
        self.scripts[prompt] = list(responses)

    def polls_for(self, job_id: str) -> int:
        return self.polls.count(job_id)

    async def _submit(self, request: web.Request) -> web.Response:
        self.headers.append(dict(request.headers))
        body = await request.json()
        self.submissions.append(body)
        if self.submit_status is not None:
            if isinstance(self.submit_body, bytes):
                return web.Response(status=self.submit_status, body=self.submit_body)
            return web.Response(status=self.submit_status, text=self.submit_body)
        job_id = f"job-{len(self.submissions)}"
        self._jobs[job_id] = list(self.scripts.get(body["prompt"], self.default_script))
        return web.json_response({"jobId": job_id})

    async def _poll(self, request: web.Request) -> web.Response:
        self.headers.append(dict(request.headers))
        job_id = request.match_info["job_id"]
        self.polls.append(job_id)
        script = self._jobs.get(job_id)
        if script is None:
            return web.Response(status=404, text="no such job")
        response = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(response, int):
            return web.Response(status=response, text="unavailable")
        if isinstance(response, str):
            return web.Response(text=response, content_type="text/html")
        return web.json_response(response)

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/agent/prompt", self._submit)
        app.router.add_get("/agent/job/{job_id}", self._poll)
        return app

    @asynccontextmanager
    async def serve(self):
        async with TestServer(self.app()) as server:
            yield str(server.make_url("/")).rstrip("/")


class RecordingSleep:
    """Drop-in for asyncio.sleep that records delays and returns at once."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_api():
    return FakeAgentAPI()


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def credentials():
    return InMemoryCredentialStore(API_KEY)


@pytest.fixture
def make_client(credentials, sleeper):
    """Build an AgentClient pointed at a running FakeAgentAPI."""

    def _make(base_url: str, policy=None, store=None, sleep=None) -> AgentClient:
        return AgentClient(
            store if store is not None else credentials,
            api_config=APIConfig(base_url=base_url, request_timeout=5),
            policy=policy or ExponentialBackoff(),
            sleep=sleep or sleeper,
        )

    return _make
