"""
nfcu_fetch package.

This package contains a client for the Navy Federal Credit Union mobile-banking
API. It includes the abstract base class `BankSession`, the Navy Federal
implementation `NavyFederalSession`, the `ApiResult` type every call returns,
and helpers for exporting accounts to CSV.
"""
from .base import BankSession
from .models import ApiResult, Account
from .config import settings, Config
from .errors import NFCUError, TransportError
from .nfcu import NavyFederalSession
from .utils import unwrap

__all__ = [
    "BankSession",
    "ApiResult",
    "Account",
    "settings",
    "Config",
    "NFCUError",
    "TransportError",
    "NavyFederalSession",
    "unwrap",
]
