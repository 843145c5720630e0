"""
Policy layer: request building, response parsing and quote normalization for
the Exade tariff web service, plus the TariffService facade that chains them.
"""

from .errors import (
    EmptyResultError,
    ProtocolError,
    RemoteFault,
    RemoteValidationError,
    TarificationError,
    TransportError,
    TransportTimeoutError,
    ValidationError,
)
from .request_builder import build_envelope, build_inner_xml, build_request
from .response_wrappers import parse_inner_document, parse_response
from .tariff_normalizer import normalize_simulation

__all__ = [
    "EmptyResultError",
    "ProtocolError",
    "RemoteFault",
    "RemoteValidationError",
    "TarificationError",
    "TransportError",
    "TransportTimeoutError",
    "ValidationError",
    "build_envelope",
    "build_inner_xml",
    "build_request",
    "normalize_simulation",
    "parse_inner_document",
    "parse_response",
]
