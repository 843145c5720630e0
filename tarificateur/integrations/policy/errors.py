"""Error taxonomy for the tariff pipeline. Nothing here is retried internally."""

from __future__ import annotations

from typing import List, Optional

BODY_EXCERPT_LIMIT = 500


def excerpt(body: Optional[str], limit: int = BODY_EXCERPT_LIMIT) -> str:
    if not body:
        return ""
    return body if len(body) <= limit else body[:limit] + "..."


class TarificationError(Exception):
    pass


class ValidationError(TarificationError):
    """A structurally required input is missing; nothing was sent."""


class TransportError(TarificationError):
    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_excerpt = excerpt(body)


class TransportTimeoutError(TransportError):
    pass


class RemoteFault(TarificationError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"SOAP fault {code}: {message}")
        self.code = code
        self.message = message


class ProtocolError(TarificationError):
    """The response does not have the expected shape."""


class RemoteValidationError(TarificationError):
    def __init__(self, messages: List[str]) -> None:
        super().__init__("; ".join(messages) or "Request rejected by Exade")
        self.messages = messages


class EmptyResultError(TarificationError):
    """Valid response without any priceable product."""
