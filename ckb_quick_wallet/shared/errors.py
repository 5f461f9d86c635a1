"""Error taxonomy for CKB Quick Wallet.

Every failure raised by the wallet carries a ``WalletErrorType`` so callers
(and ``shared.logging.get_user_friendly_error``) can branch on the kind
without string matching.
"""

from __future__ import annotations

from enum import Enum


class WalletErrorType(Enum):
    INVALID_POLICY = "invalid_policy"
    WRONG_KEY_COUNT = "wrong_key_count"
    UNSUPPORTED_TARGET = "unsupported_target"
    INVALID_ADDRESS = "invalid_address"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    DEPENDENCY_NOT_FOUND = "dependency_not_found"
    OUT_OF_RANGE = "out_of_range"
    MALFORMED_INPUT = "malformed_input"
    BROADCAST_REJECTED = "broadcast_rejected"
    UNKNOWN = "unknown"


class WalletError(Exception):
    error_type = WalletErrorType.UNKNOWN

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidPolicy(WalletError):
    error_type = WalletErrorType.INVALID_POLICY


class WrongKeyCount(WalletError):
    error_type = WalletErrorType.WRONG_KEY_COUNT


class UnsupportedTarget(WalletError):
    error_type = WalletErrorType.UNSUPPORTED_TARGET


class InvalidAddress(WalletError):
    error_type = WalletErrorType.INVALID_ADDRESS


class InsufficientFunds(WalletError):
    error_type = WalletErrorType.INSUFFICIENT_FUNDS


class DependencyNotFound(WalletError):
    error_type = WalletErrorType.DEPENDENCY_NOT_FOUND


class OutOfRange(WalletError):
    error_type = WalletErrorType.OUT_OF_RANGE


class MalformedInput(WalletError):
    error_type = WalletErrorType.MALFORMED_INPUT


class BroadcastRejected(WalletError):
    error_type = WalletErrorType.BROADCAST_REJECTED

    def __init__(self, message: str, code: int | None = None, data: str | None = None):
        super().__init__(message)
        self.code = code
        self.data = data


__all__ = [
    "WalletErrorType",
    "WalletError",
    "InvalidPolicy",
    "WrongKeyCount",
    "UnsupportedTarget",
    "InvalidAddress",
    "InsufficientFunds",
    "DependencyNotFound",
    "OutOfRange",
    "MalformedInput",
    "BroadcastRejected",
]
