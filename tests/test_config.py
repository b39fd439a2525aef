"""Tests for configuration and agent wiring."""

import pytest

from bankr_markets.agent import BankrAgent
from bankr_markets.config import APIConfig, AppConfig, CredentialConfig, PollingConfig
from bankr_markets.credentials import DotenvCredentialStore, InMemoryCredentialStore
from bankr_markets.jobs.backoff import ExponentialBackoff, FixedInterval


class TestPollingConfig:
    def test_default_is_exponential(self):
        policy = PollingConfig(policy="exponential").build_policy()
        assert isinstance(policy, ExponentialBackoff)
        assert policy.initial == 0.5
        assert policy.max_delay == 3.0

    def test_fixed(self):
        policy = PollingConfig(policy="fixed", max_attempts=10).build_policy()
        assert isinstance(policy, FixedInterval)
        assert policy.max_attempts == 10

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            PollingConfig(policy="yolo").build_policy()


class TestBankrAgent:
    @pytest.mark.asyncio
    async def test_wires_dotenv_store_from_config(self, tmp_path):
        config = AppConfig(credentials=CredentialConfig(store_path=str(tmp_path / "creds")))
        async with BankrAgent(config) as agent:
            assert isinstance(agent.credentials, DotenvCredentialStore)
            assert agent.credentials.path == tmp_path / "creds"
            assert agent.client.credentials is agent.credentials
            assert agent.polymarket.client is agent.client

    @pytest.mark.asyncio
    async def test_uses_given_store_and_policy(self):
        store = InMemoryCredentialStore("bk_x")
        config = AppConfig(polling=PollingConfig(policy="fixed"))
        async with BankrAgent(config, credentials=store) as agent:
            assert agent.client.credentials is store
            assert isinstance(agent.client.policy, FixedInterval)

    @pytest.mark.asyncio
    async def test_end_to_end_against_api(self, fake_api, sleeper, credentials):
        fake_api.script("what are my balances?", {"status": "pending"},
                        {"status": "completed", "result": "0.01 ETH"})

        async with fake_api.serve() as url:
            config = AppConfig(api=APIConfig(base_url=url))
            async with BankrAgent(config, credentials=credentials, sleep=sleeper) as agent:
                assert await agent.polymarket.get_balances() == "0.01 ETH"

        assert sleeper.delays == [0.5, 0.75]
