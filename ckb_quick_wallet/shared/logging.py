"""Centralized logging configuration for CKB Quick Wallet.

This module provides:
- Configurable log levels (DEBUG for dev, INFO for prod)
- Private key sanitization for log records
- User-friendly messages for wallet error kinds
- Structured logging with context fields
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from ckb_quick_wallet.shared.errors import WalletError, WalletErrorType


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


@dataclass
class LoggingConfig:
    log_level: LogLevel = LogLevel.INFO
    log_to_file: bool = False
    log_to_stdout: bool = False
    log_dir: Path | None = None
    log_filename: str = "wallet.log"
    json_format: bool = False
    sanitize_sensitive: bool = True
    include_context: bool = True

    @classmethod
    def from_environment(cls) -> "LoggingConfig":
        env_level = os.getenv("CKB_WALLET_LOG_LEVEL", "INFO").upper()
        try:
            log_level = LogLevel(env_level)
        except ValueError:
            log_level = LogLevel.INFO

        return cls(
            log_level=log_level,
            log_to_file=_env_flag("CKB_WALLET_LOG_FILE"),
            log_to_stdout=_env_flag("CKB_WALLET_LOG_STDOUT"),
            json_format=os.getenv("CKB_WALLET_LOG_FORMAT", "human").lower() == "json",
        )


SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(
            r"(private[_-]?key['\"]?\s*[:=]\s*['\"]?)(0x)?([A-Fa-f0-9]{64})",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    (
        re.compile(
            r"(privkey['\"]?\s*[:=]\s*['\"]?)(0x)?([A-Fa-f0-9]{64})",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
]

SENSITIVE_KEYS = ("private_key", "privatekey", "privkey", "secret")


def sanitize_message(message: str) -> str:
    if not message:
        return message

    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in data.items():
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            result[key] = "[REDACTED]"
        elif isinstance(value, str):
            result[key] = sanitize_message(value)
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value)
        elif isinstance(value, list):
            result[key] = [
                sanitize_dict(item)
                if isinstance(item, dict)
                else sanitize_message(item)
                if isinstance(item, str)
                else item
                for item in value
            ]
        else:
            result[key] = value
    return result


@dataclass
class ErrorMapping:
    user_message: str
    suggest_action: str | None = None


ERROR_MAPPINGS: dict[WalletErrorType, ErrorMapping] = {
    WalletErrorType.INVALID_POLICY: ErrorMapping(
        user_message="The multisig configuration is not valid.",
        suggest_action="Check the threshold, first-N and key count (each at most 255).",
    ),
    WalletErrorType.WRONG_KEY_COUNT: ErrorMapping(
        user_message="The number of signing keys does not match the threshold.",
        suggest_action="Provide exactly as many private keys as the threshold requires.",
    ),
    WalletErrorType.UNSUPPORTED_TARGET: ErrorMapping(
        user_message="Sending to this kind of address is not supported.",
        suggest_action="Use a default single-signature address as the target.",
    ),
    WalletErrorType.INVALID_ADDRESS: ErrorMapping(
        user_message="The address provided is not valid.",
        suggest_action="Please check the recipient address format.",
    ),
    WalletErrorType.INSUFFICIENT_FUNDS: ErrorMapping(
        user_message="Insufficient capacity for this transaction.",
        suggest_action="Ensure you have enough CKBytes for the transfer and fees.",
    ),
    WalletErrorType.DEPENDENCY_NOT_FOUND: ErrorMapping(
        user_message="The token contract is not deployed on this chain.",
        suggest_action="Check that the wallet is connected to the right node.",
    ),
    WalletErrorType.OUT_OF_RANGE: ErrorMapping(
        user_message="The token amount is out of range.",
    ),
    WalletErrorType.MALFORMED_INPUT: ErrorMapping(
        user_message="Received malformed data.",
    ),
    WalletErrorType.BROADCAST_REJECTED: ErrorMapping(
        user_message="The node rejected the transaction.",
        suggest_action="Inspect the node error and rebuild the transaction.",
    ),
}

NETWORK_ERROR_PATTERNS: list[tuple[str, ErrorMapping]] = [
    (
        "timeout|timed out",
        ErrorMapping(
            user_message="Connection timed out. The node may be slow or unavailable.",
            suggest_action="Try again later or check your network connection.",
        ),
    ),
    (
        "connection refused|cannot connect|connection error",
        ErrorMapping(
            user_message="Unable to connect to the node.",
            suggest_action="Check the node URL and your network connection.",
        ),
    ),
]


def get_user_friendly_error(error: Exception | str) -> tuple[str, str | None]:
    if isinstance(error, WalletError):
        mapping = ERROR_MAPPINGS.get(error.error_type)
        if mapping:
            return mapping.user_message, mapping.suggest_action

    error_lower = str(error).lower()
    for pattern, mapping in NETWORK_ERROR_PATTERNS:
        if re.search(pattern, error_lower):
            return mapping.user_message, mapping.suggest_action

    return "An unexpected error occurred.", None


def format_error_for_user(error: Exception | str) -> str:
    user_message, suggestion = get_user_friendly_error(error)
    if suggestion:
        return f"{user_message} {suggestion}"
    return user_message


class StructuredFormatter(logging.Formatter):
    def __init__(self, sanitize: bool = True, include_context: bool = True):
        super().__init__()
        self.sanitize = sanitize
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            log_data["module"] = record.module
            log_data["function"] = record.funcName
            log_data["line"] = record.lineno

        extra_data = getattr(record, "context", None)
        if extra_data and isinstance(extra_data, dict):
            if self.sanitize:
                extra_data = sanitize_dict(extra_data)
            log_data["context"] = extra_data

        if record.exc_info:
            exc_text = self.formatException(record.exc_info)
            log_data["exception"] = sanitize_message(exc_text) if self.sanitize else exc_text

        if self.sanitize:
            log_data["message"] = sanitize_message(log_data["message"])

        try:
            return json.dumps(log_data)
        except (TypeError, ValueError):
            return f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"


class HumanReadableFormatter(logging.Formatter):
    def __init__(self, sanitize: bool = True):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.sanitize = sanitize

    def format(self, record: logging.LogRecord) -> str:
        if self.sanitize and record.msg:
            record.msg = sanitize_message(str(record.msg))
            if record.args and isinstance(record.args, tuple):
                record.args = tuple(
                    sanitize_message(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )
        return super().format(record)


class ContextAdapter(logging.LoggerAdapter):
    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None):
        super().__init__(logger, context or {})

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        if self.extra:
            context = {**self.extra, **extra.get("context", {})}
            extra = {**extra, "context": context}
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **kwargs: Any) -> "ContextAdapter":
        return ContextAdapter(self.logger, {**self.extra, **kwargs})


_logging_initialized = False


def _make_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.json_format:
        return StructuredFormatter(
            sanitize=config.sanitize_sensitive,
            include_context=config.include_context,
        )
    return HumanReadableFormatter(sanitize=config.sanitize_sensitive)


def setup_logging(config: LoggingConfig | None = None) -> None:
    global _logging_initialized

    if _logging_initialized:
        return

    if config is None:
        config = LoggingConfig.from_environment()

    package_logger = logging.getLogger("ckb_quick_wallet")
    package_logger.setLevel(getattr(logging, config.log_level.value))

    handlers: list[logging.Handler] = []

    if config.log_to_file:
        if config.log_dir is None:
            config.log_dir = Path.home() / ".ckb-quick-wallet"
        config.log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(
                config.log_dir / config.log_filename, mode="a", encoding="utf-8"
            )
        )

    if config.log_to_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(_make_formatter(config))
        package_logger.addHandler(handler)

    _logging_initialized = True


def get_logger(name: str, context: dict[str, Any] | None = None) -> ContextAdapter:
    if not _logging_initialized:
        setup_logging()

    return ContextAdapter(logging.getLogger(name), context)


def log_with_context(
    logger: logging.Logger | ContextAdapter,
    level: int,
    message: str,
    **context: Any,
) -> None:
    if isinstance(logger, ContextAdapter):
        logger.with_context(**context).log(level, message)
    else:
        logger.log(level, message, extra={"context": context})


__all__ = [
    "LogLevel",
    "LoggingConfig",
    "ContextAdapter",
    "StructuredFormatter",
    "HumanReadableFormatter",
    "sanitize_message",
    "sanitize_dict",
    "get_user_friendly_error",
    "format_error_for_user",
    "setup_logging",
    "get_logger",
    "log_with_context",
]
