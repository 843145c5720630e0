"""
Mock integration clients.

Used in development and tests. They never make network calls and expose the
same interface as the real HTTP clients.
"""

from .exade import MOCK_RESPONSE, MockExadeClient

__all__ = ["MOCK_RESPONSE", "MockExadeClient"]
