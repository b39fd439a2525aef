"""
The Agent - everything wired together.

Config -> credential store -> polling policy -> HTTP client -> Polymarket
commands. Use it as an async context manager so the HTTP session is closed.
"""

from typing import Optional

from bankr_markets.config import AppConfig
from bankr_markets.credentials import CredentialStore, DotenvCredentialStore
from bankr_markets.jobs.client import AgentClient
from bankr_markets.jobs.models import CommandResult
from bankr_markets.markets.polymarket import PolymarketCommands


class BankrAgent:
    """One place to get a ready-to-use client and its Polymarket commands."""

    def __init__(self, config: Optional[AppConfig] = None,
                 credentials: Optional[CredentialStore] = None,
                 **client_kwargs):
        self.config = config or AppConfig()
        self.credentials = credentials or DotenvCredentialStore(
            self.config.credentials.store_path,
            key_name=self.config.credentials.key_name,
        )
        self.client = AgentClient(
            self.credentials,
            api_config=self.config.api,
            policy=self.config.polling.build_policy(),
            **client_kwargs,
        )
        self.polymarket = PolymarketCommands(self.client)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.close()

    async def ask(self, prompt: str, thread_id: Optional[str] = None) -> CommandResult:
        """Free-form prompt. Pass the previous thread_id to keep context."""
        return await self.client.execute_command(prompt, thread_id)
