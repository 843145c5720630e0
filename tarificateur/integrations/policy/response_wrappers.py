"""
Exade response parsing.

The SOAP envelope carries a second XML document as the string result of
webservice_tarificateur. Prefixes differ between Exade environments, so every
lookup goes through an ordered list of candidate keys (see xml_tree.find_first).
"""

from __future__ import annotations

import html
import logging
from typing import Any, Dict, List, Optional

from .errors import ProtocolError, RemoteFault, RemoteValidationError
from .xml_tree import Node, as_list, child_text, find_first, parse_fragment, parse_xml, text_of

logger = logging.getLogger(__name__)

OPERATION = "webservice_tarificateur"

_SOAP_PREFIXES = ("soap", "soapenv", "SOAP-ENV", "env", "S", "s")
ENVELOPE_KEYS = tuple(f"{prefix}:Envelope" for prefix in _SOAP_PREFIXES) + ("Envelope",)
BODY_KEYS = tuple(f"{prefix}:Body" for prefix in _SOAP_PREFIXES) + ("Body",)
FAULT_KEYS = tuple(f"{prefix}:Fault" for prefix in _SOAP_PREFIXES) + ("Fault",)
RESPONSE_KEYS = tuple(
    f"{prefix}:{OPERATION}Response" for prefix in ("def", "ns1", "tns", "m", "ns")
) + (f"{OPERATION}Response",)
RESULT_KEYS = (f"{OPERATION}Result",) + tuple(
    f"{prefix}:{OPERATION}Result" for prefix in ("def", "ns1", "tns", "m", "ns")
)

ERROR_LIST_KEY = "listeErreurs"


def error_messages(node: Optional[Node]) -> List[str]:
    """Flatten a <listeErreurs> block into display messages."""
    messages: List[str] = []
    for entry in as_list(node):
        if isinstance(entry, dict):
            items = entry.get("erreur")
            if items is None:
                items = [entry]
            for item in as_list(items):
                message = _error_text(item)
                if message:
                    messages.append(message)
        else:
            message = text_of(entry).strip()
            if message:
                messages.append(message)
    return messages


def _error_text(item: Node) -> str:
    if not isinstance(item, dict):
        return text_of(item).strip()
    for key in ("libelle", "message", "description"):
        value = child_text(item, key)
        if value:
            return value
    return text_of(item).strip()


def _locate_body(tree: Dict[str, Any]) -> Dict[str, Any]:
    envelope = find_first(tree, ENVELOPE_KEYS, local="Envelope")
    body = find_first(envelope, BODY_KEYS, local="Body")
    if body is None:
        body = find_first(tree, BODY_KEYS, local="Body")
    if body is None:
        raise ProtocolError("no body")
    # An empty <soap:Body/> parses to ""
    return body if isinstance(body, dict) else {}


def _raise_for_fault(body: Dict[str, Any]) -> None:
    fault = find_first(body, FAULT_KEYS, local="Fault")
    if fault is None:
        return
    if not isinstance(fault, dict):
        raise RemoteFault("Server", text_of(fault) or "Unknown SOAP fault")

    code = text_of(find_first(fault, ("faultcode",), local="faultcode"))
    message = text_of(find_first(fault, ("faultstring",), local="faultstring"))
    if not code:
        # SOAP 1.2 style <Code><Value/></Code>
        code = text_of(find_first(find_first(fault, (), local="Code"), (), local="Value"))
    if not message:
        message = text_of(find_first(find_first(fault, (), local="Reason"), (), local="Text"))
    raise RemoteFault(code.strip() or "Server", message.strip() or "Unknown SOAP fault")


def _extract_result(body: Dict[str, Any]) -> str:
    response = find_first(body, RESPONSE_KEYS, local=f"{OPERATION}Response")
    result = find_first(response, RESULT_KEYS, local=f"{OPERATION}Result")

    if result is None and isinstance(response, dict):
        for key, value in response.items():
            if "result" in key.lower():
                logger.warning("Exade result found under unexpected key %r", key)
                result = value
                break

    payload = text_of(result).strip()
    if not payload:
        raise ProtocolError("no result")
    return payload


def decode_result(payload: str) -> str:
    """Undo HTML-entity encoding of the inner document when present."""
    if "&lt;" in payload or "&gt;" in payload:
        return html.unescape(payload)
    return payload


def parse_inner_document(payload: str) -> Dict[str, Any]:
    """
    Parse the inner Exade document and return its <simulation> node.

    Raises:
        RemoteValidationError: The document is an error list instead of a simulation.
        ProtocolError: Neither a simulation nor an error list is present.
    """
    tree = parse_fragment(decode_result(payload))

    simulation = tree.get("simulation")
    if simulation is not None:
        return simulation if isinstance(simulation, dict) else {}

    errors = tree.get(ERROR_LIST_KEY)
    if errors is None:
        for value in tree.values():
            if isinstance(value, dict) and ERROR_LIST_KEY in value:
                errors = value[ERROR_LIST_KEY]
                break
    if errors is not None:
        messages = error_messages(errors)
        raise RemoteValidationError(messages or ["Request rejected by Exade"])

    raise ProtocolError("no simulation node")


def parse_response(raw: str) -> Dict[str, Any]:
    """Envelope -> body -> fault check -> result string -> simulation tree."""
    body = _locate_body(parse_xml(raw))
    _raise_for_fault(body)
    return parse_inner_document(_extract_result(body))
