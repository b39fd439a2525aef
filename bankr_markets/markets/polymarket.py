"""
Polymarket Commands.

Prediction markets, but you just ask for what you want.

Each command is a plain-English prompt handed to the Bankr agent:
- Balances
- Market search and odds
- Open positions
- Placing bets (YES/NO or any named outcome)
- Redeeming resolved winners
"""

import math

from bankr_markets.jobs.client import AgentClient


def balances_prompt() -> str:
    return "what are my balances?"


def search_prompt(query: str) -> str:
    return f"search polymarket for {_require(query, 'search term')}"


def odds_prompt(market: str) -> str:
    return f"what are the odds for {_require(market, 'market')} on polymarket?"


def positions_prompt() -> str:
    return "show my polymarket positions"


def bet_prompt(amount: float, position: str, market: str) -> str:
    """
    Bet instruction, e.g. "bet $5 on YES for Will it rain tomorrow".

    Whole-dollar amounts are written without decimals.
    """
    if not math.isfinite(amount) or amount <= 0:
        raise ValueError("Bet amount must be positive")
    position = _require(position, "position")
    market = _require(market, "market")
    return f"bet ${_format_amount(amount)} on {position} for {market}"


def redeem_prompt() -> str:
    return "redeem my winning polymarket positions"


def _require(value: str, name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"Please enter a {name}")
    return value


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


class PolymarketCommands:
    """
    Polymarket actions on top of an AgentClient.

    Every method returns the agent's answer as text. Errors from the
    client propagate unchanged.
    """

    def __init__(self, client: AgentClient):
        self.client = client

    async def _run(self, prompt: str) -> str:
        result = await self.client.execute_command(prompt)
        return result.text

    async def get_balances(self) -> str:
        return await self._run(balances_prompt())

    async def search_markets(self, query: str) -> str:
        return await self._run(search_prompt(query))

    async def get_market_odds(self, market: str) -> str:
        return await self._run(odds_prompt(market))

    async def get_positions(self) -> str:
        return await self._run(positions_prompt())

    async def place_bet(self, amount: float, position: str, market: str) -> str:
        """Moves real money. Confirm with the user before calling."""
        return await self._run(bet_prompt(amount, position, market))

    async def redeem_winnings(self) -> str:
        return await self._run(redeem_prompt())
