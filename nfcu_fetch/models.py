from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from abc import ABC, abstractmethod

"""
Data Models for nfcu-fetch

Key Classes:
- ApiResult: The normalized outcome of every API call.
- BaseModel: Abstract base class providing dictionary-backed storage and CSV export.
- Account: A bank account taken from the account summary, ready for CSV export.
"""

SUCCESS = "SUCCESS"
FAILED = "FAILED"


@dataclass
class ApiResult:
    """
    Normalized response of a single API call.

    On success `data` is the payload found under the endpoint's wrapper key.
    On failure `data` is the full raw body and `error` is True. API-level
    failures are never raised; check `success` or `api_status`.
    """
    data: Any
    error: bool
    status_code: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    key: Optional[str] = None

    @property
    def success(self) -> bool:
        return not self.error

    @property
    def api_status(self) -> Optional[str]:
        """The `status` reported inside the wrapper, e.g. "SUCCESS" or "FAILED"."""
        if not self.error:
            return SUCCESS
        if self.key is None or not isinstance(self.data, dict):
            return None
        wrapper = self.data.get(self.key)
        if isinstance(wrapper, dict):
            return wrapper.get('status')
        return None


class BaseModel(ABC):
    """
    Abstract base model that wraps a raw data dictionary.

    Provides utility methods to get/set values and flatten nested dictionaries
    for flat CSV export.
    """
    def __init__(self, raw_data: Dict[str, Any]):
        self.raw_data = raw_data

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw_data.get(key, default)

    def set(self, key: str, value: Any):
        self.raw_data[key] = value

    def _flatten_raw_data(self) -> Dict[str, Any]:
        """
        Flattens the raw_data dictionary using dot notation for nested keys.
        """
        out = {}
        def flatten(x, name=''):
            if type(x) is dict:
                for a in x:
                    flatten(x[a], name + a + '.')
            else:
                out[name[:-1]] = x
        flatten(self.raw_data)
        return out

    @abstractmethod
    def get_required_csv_row(self) -> Dict[str, Any]:
        """
        Returns a dictionary of the required CSV fields and their values.
        """
        pass

    def to_csv_row(self) -> Dict[str, Any]:
        """
        Serializes the model to a CSV row dictionary.
        Merges required fields with flattened raw data.
        """
        row = self.get_required_csv_row()
        row.update(self._flatten_raw_data())
        return row


class Account(BaseModel):
    """
    A Navy Federal account as listed by the account summary endpoint.

    The typed fields are copied out of the summary entry; everything the API
    returned stays in `raw_data` and is exported as extra CSV columns.
    """
    CSV_FIELDS = [
        'Account ID',
        'Account Name',
        'Account Number',
        'Type',
        'Currency',
        'Current Balance',
        'Available Balance',
    ]

    def __init__(self, raw_data: Dict[str, Any], account_id: str):
        super().__init__(raw_data)
        self.account_id = account_id

    @classmethod
    def from_summary_entry(cls, entry: Dict[str, Any]) -> "Account":
        """Build an Account from one element of `accountSummary.accounts`."""
        account = cls(dict(entry), str(entry.get('accountId', '')))
        account.account_name = entry.get('nickName') or entry.get('accountName') or account.account_id
        account.account_number = str(entry.get('accountNumber') or entry.get('maskedAccountNumber') or '')
        account.type = entry.get('accountType') or entry.get('productType') or ''
        account.currency = entry.get('currency') or 'USD'
        account.current_balance = entry.get('currentBalance', 0.0)
        account.available_balance = entry.get('availableBalance', 0.0)
        return account

    @property
    def account_id(self) -> str:
        return self.get('Account ID', '')

    @account_id.setter
    def account_id(self, value: str):
        self.set('Account ID', value)

    @property
    def account_name(self) -> str:
        return self.get('Account Name', '')

    @account_name.setter
    def account_name(self, value: str):
        self.set('Account Name', value)

    @property
    def account_number(self) -> str:
        return self.get('Account Number', '')

    @account_number.setter
    def account_number(self, value: str):
        self.set('Account Number', value)

    @property
    def type(self) -> str:
        return self.get('Type', '')

    @type.setter
    def type(self, value: str):
        self.set('Type', value)

    @property
    def currency(self) -> str:
        return self.get('Currency', '')

    @currency.setter
    def currency(self, value: str):
        self.set('Currency', value)

    @property
    def current_balance(self) -> float:
        val = self.get('Current Balance', 0.0)
        try:
            return float(val)
        except (ValueError, TypeError):
            return 0.0

    @current_balance.setter
    def current_balance(self, value: float):
        self.set('Current Balance', value)

    @property
    def available_balance(self) -> float:
        val = self.get('Available Balance', 0.0)
        try:
            return float(val)
        except (ValueError, TypeError):
            return 0.0

    @available_balance.setter
    def available_balance(self, value: float):
        self.set('Available Balance', value)

    def get_required_csv_row(self) -> Dict[str, Any]:
        return {
            'Account ID': self.account_id,
            'Account Name': self.account_name,
            'Account Number': self.account_number,
            'Type': self.type,
            'Currency': self.currency,
            'Current Balance': self.current_balance,
            'Available Balance': self.available_balance,
        }
