"""Shared utilities for CKB Quick Wallet."""

from ckb_quick_wallet.shared.config import WalletConfig, config_for
from ckb_quick_wallet.shared.errors import (
    BroadcastRejected,
    DependencyNotFound,
    InsufficientFunds,
    InvalidAddress,
    InvalidPolicy,
    MalformedInput,
    OutOfRange,
    UnsupportedTarget,
    WalletError,
    WalletErrorType,
    WrongKeyCount,
)
from ckb_quick_wallet.shared.logging import (
    ContextAdapter,
    LoggingConfig,
    LogLevel,
    format_error_for_user,
    get_logger,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    setup_logging,
)
from ckb_quick_wallet.shared.network import (
    JsonRpcClient,
    NetworkError,
    NetworkErrorType,
    RpcError,
    TimeoutConfig,
)

__all__ = [
    "WalletConfig",
    "config_for",
    "WalletError",
    "WalletErrorType",
    "InvalidPolicy",
    "WrongKeyCount",
    "UnsupportedTarget",
    "InvalidAddress",
    "InsufficientFunds",
    "DependencyNotFound",
    "OutOfRange",
    "MalformedInput",
    "BroadcastRejected",
    "JsonRpcClient",
    "NetworkError",
    "NetworkErrorType",
    "RpcError",
    "TimeoutConfig",
    "ContextAdapter",
    "LoggingConfig",
    "LogLevel",
    "format_error_for_user",
    "get_logger",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "setup_logging",
]
