"""Wordle game server: session engine, daily limits and play statistics.

The engine modules are kept free of FastAPI concerns so they can be reused by
API routes, scripts, and tests.
"""
