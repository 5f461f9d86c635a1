"""JSON-RPC transport for CKB Quick Wallet with timeout handling.

Requests are sent once. Retrying against the node is left to the caller.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests
from requests.exceptions import ConnectionError, HTTPError, Timeout

logger = logging.getLogger(__name__)


class NetworkErrorType(Enum):
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_ERROR = "http_error"
    INVALID_RESPONSE = "invalid_response"
    UNKNOWN = "unknown"


@dataclass
class NetworkError(Exception):
    error_type: NetworkErrorType
    message: str
    original_error: Exception | None = None
    status_code: int | None = None
    response_text: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class RpcError(Exception):
    """An ``error`` object returned by the node in a JSON-RPC response."""

    code: int
    message: str
    data: Any = None

    def __str__(self) -> str:
        return f"RPC error {self.code}: {self.message}"


@dataclass
class TimeoutConfig:
    connect_timeout: float = 5.0
    read_timeout: float = 30.0

    @property
    def request_timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


DEFAULT_TIMEOUT_CONFIG = TimeoutConfig()


def classify_error(error: Exception) -> NetworkErrorType:
    if isinstance(error, Timeout):
        return NetworkErrorType.TIMEOUT
    elif isinstance(error, ConnectionError):
        return NetworkErrorType.CONNECTION_ERROR
    elif isinstance(error, HTTPError):
        return NetworkErrorType.HTTP_ERROR
    return NetworkErrorType.UNKNOWN


def create_network_error(
    error: Exception, node_url: str, context: str = ""
) -> NetworkError:
    error_type = classify_error(error)
    context_prefix = f"{context}: " if context else ""

    if error_type == NetworkErrorType.TIMEOUT:
        message = (
            f"{context_prefix}Connection timeout. Node may be unavailable: {node_url}"
        )
    elif error_type == NetworkErrorType.CONNECTION_ERROR:
        message = (
            f"{context_prefix}Cannot connect to node: {node_url}. "
            "Check your network connection."
        )
    elif error_type == NetworkErrorType.HTTP_ERROR:
        response = getattr(error, "response", None)
        status_code = getattr(response, "status_code", None)
        response_text = getattr(response, "text", None)
        return NetworkError(
            error_type=error_type,
            message=f"{context_prefix}HTTP error {status_code}: {response_text or 'Unknown error'}",
            original_error=error,
            status_code=status_code,
            response_text=response_text,
        )
    else:
        message = f"{context_prefix}Network error: {str(error)}"

    return NetworkError(error_type=error_type, message=message, original_error=error)


class JsonRpcClient:
    def __init__(self, node_url: str, timeout_config: TimeoutConfig | None = None):
        self.node_url = node_url.rstrip("/")
        self.timeout_config = timeout_config or DEFAULT_TIMEOUT_CONFIG
        self._ids = itertools.count(1)

    def call(self, method: str, *params: Any) -> Any:
        payload = {
            "id": next(self._ids),
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params),
        }
        logger.debug("RPC %s -> %s", method, self.node_url)

        try:
            response = requests.post(
                self.node_url,
                json=payload,
                timeout=self.timeout_config.request_timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise create_network_error(e, self.node_url, method) from e

        try:
            body = response.json()
        except ValueError as e:
            raise NetworkError(
                error_type=NetworkErrorType.INVALID_RESPONSE,
                message=f"{method}: node returned a non-JSON response",
                original_error=e,
                status_code=response.status_code,
                response_text=response.text,
            ) from e

        if not isinstance(body, dict):
            raise NetworkError(
                error_type=NetworkErrorType.INVALID_RESPONSE,
                message=f"{method}: expected a JSON-RPC object, got {type(body).__name__}",
                status_code=response.status_code,
                response_text=response.text,
            )

        error = body.get("error")
        if error:
            raise RpcError(
                code=error.get("code", 0),
                message=error.get("message", ""),
                data=error.get("data"),
            )
        return body.get("result")
