"""
Integration clients: real HTTP implementations and development mocks.
"""

from .mocks import MockExadeClient
from .real_http import ExadeHttpClient

__all__ = ["ExadeHttpClient", "MockExadeClient"]
