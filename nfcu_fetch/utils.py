import csv
import logging
from datetime import date
from pathlib import Path
from typing import List, Dict, Any, Optional

from .models import ApiResult, SUCCESS

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def endpoint_key(endpoint: str) -> str:
    """
    Return the wrapper key an endpoint nests its payload under.

    The key is the last `/`-delimited segment of the path, e.g.
    `NativeBanking/services/accountDetails` -> `accountDetails`.
    """
    return endpoint.split("/")[-1]


def unwrap(endpoint: str, body: Any) -> ApiResult:
    """
    Normalize a raw response body.

    `{"<key>": {"status": "SUCCESS", "data": X}}` resolves to X with no error
    flag. Any other shape resolves to the raw body with the error flag set.
    """
    key = endpoint_key(endpoint)
    wrapper = body.get(key) if isinstance(body, dict) else None
    if isinstance(wrapper, dict) and wrapper.get("status") == SUCCESS:
        return ApiResult(data=wrapper.get("data"), error=False, key=key)
    return ApiResult(data=body, error=True, key=key)


def extract_session_cookie(headers_array: List[Dict[str, str]]) -> Optional[str]:
    """
    Pull the session token out of a response's headers.

    Only the first `Set-Cookie` header is used, trimmed to its `name=value` part.
    """
    for header in headers_array:
        if header.get("name", "").lower() == "set-cookie":
            token = header.get("value", "").split(";")[0].strip()
            return token or None
    return None


def format_transfer_date(day: Optional[date] = None) -> str:
    """Format a transfer date as YYYY-MM-DD, defaulting to today's local date."""
    return (day or date.today()).strftime(DATE_FORMAT)


class CSVWriter:
    """
    Helper class to write flattened records to CSV files.

    Handles creation of the output directory. The required fields come first,
    in the order given; any additional keys found in the rows are appended as
    extra columns.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write(self, rows: List[Dict[str, Any]], filename: str, fieldnames: List[str]) -> Optional[Path]:
        """Write rows to a CSV file and return its path."""
        if not rows:
            return None

        filepath = self.output_dir / filename

        extra = []
        for row in rows:
            for k in row:
                if k not in fieldnames and k not in extra:
                    extra.append(k)

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames + extra)
            writer.writeheader()
            writer.writerows(rows)

        logger.info("Saved %d rows to %s", len(rows), filepath)
        return filepath
