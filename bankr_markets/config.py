"""
Configuration for Bankr Markets.

Values come from the environment, with a local .env file loaded first.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from bankr_markets.jobs.backoff import ExponentialBackoff, FixedInterval, PollPolicy

load_dotenv()


@dataclass
class APIConfig:
    base_url: str = os.getenv("BANKR_API_URL", "https://api.bankr.bot")
    api_key_header: str = "X-API-Key"
    request_timeout: float = float(os.getenv("BANKR_REQUEST_TIMEOUT", "30"))


@dataclass
class PollingConfig:
    policy: str = os.getenv("BANKR_POLL_POLICY", "exponential")
    initial_delay: float = 0.5
    multiplier: float = 1.5
    max_delay: float = 3.0
    fixed_interval: float = 1.0
    max_attempts: int = int(os.getenv("BANKR_POLL_MAX_ATTEMPTS", "30"))

    def build_policy(self) -> PollPolicy:
        if self.policy == "exponential":
            return ExponentialBackoff(
                initial=self.initial_delay,
                multiplier=self.multiplier,
                max_delay=self.max_delay,
                max_attempts=self.max_attempts,
            )
        if self.policy == "fixed":
            return FixedInterval(
                interval=self.fixed_interval,
                max_attempts=self.max_attempts,
            )
        raise ValueError(f"Unknown poll policy: {self.policy!r}")


@dataclass
class CredentialConfig:
    store_path: str = os.getenv(
        "BANKR_CREDENTIALS_FILE", str(Path.home() / ".bankr" / "credentials")
    )
    key_name: str = "BANKR_API_KEY"


@dataclass
class AppConfig:
    api: APIConfig = field(default_factory=APIConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    credentials: CredentialConfig = field(default_factory=CredentialConfig)
