"""
Bankr Markets - Polymarket from the terminal, one sentence at a time.

A client for the Bankr agent API. Every action (balances, market search,
bets, redemptions) is a natural-language prompt submitted as a job and
polled until the agent is done with it.
"""

__version__ = "0.1.0"
