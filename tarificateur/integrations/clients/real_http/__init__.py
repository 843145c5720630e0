"""
Real HTTP integration clients.

These clients talk to the live Exade web service. They must expose the same
`send(envelope, persist=...)` coroutine as the mock clients.

Switching:
The selection of mock vs real client happens in TariffService only.
"""

from .exade import ExadeHttpClient

__all__ = ["ExadeHttpClient"]
