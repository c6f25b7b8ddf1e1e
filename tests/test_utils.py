"""Tests for response unwrapping and the small helpers in nfcu_fetch.utils."""

import csv
from datetime import date

import pytest

from nfcu_fetch.utils import (
    CSVWriter,
    endpoint_key,
    extract_session_cookie,
    format_transfer_date,
    unwrap,
)


class TestEndpointKey:
    """Tests for wrapper key derivation."""

    @pytest.mark.parametrize(
        "endpoint,key",
        [
            ("Authenticator/services/loginv2", "loginv2"),
            ("MFA/services/riskCheck", "riskCheck"),
            ("NativeBanking/services/accountDetails", "accountDetails"),
            ("NativeBanking/services/transferAccountsList", "transferAccountsList"),
        ],
    )
    def test_last_path_segment(self, endpoint, key):
        """The key is the last segment of the endpoint path."""
        assert endpoint_key(endpoint) == key

    def test_path_without_slash(self):
        """A bare name is its own key."""
        assert endpoint_key("transfer") == "transfer"


class TestUnwrap:
    """Tests for the success/failure normalization rule."""

    def test_success_returns_inner_data(self):
        """A SUCCESS wrapper resolves to its data with no error flag."""
        body = {"accountSummary": {"status": "SUCCESS", "data": {"accounts": [1, 2]}}}

        result = unwrap("NativeBanking/services/accountSummary", body)

        assert result.error is False
        assert result.data == {"accounts": [1, 2]}

    def test_failed_status_returns_raw_body(self):
        """A FAILED wrapper resolves to the whole body with the error flag."""
        body = {"loginv2": {"status": "FAILED", "errorMessage": "Invalid credentials"}}

        result = unwrap("Authenticator/services/loginv2", body)

        assert result.error is True
        assert result.data is body
        assert result.data["loginv2"]["status"] == "FAILED"

    def test_status_taken_from_endpoint_wrapper(self):
        """The reported status comes from the endpoint's own wrapper."""
        body = {"errorInfo": {"status": "E1001"}, "loginv2": {"status": "FAILED"}}

        result = unwrap("Authenticator/services/loginv2", body)

        assert result.key == "loginv2"
        assert result.api_status == "FAILED"

    def test_missing_wrapper_key(self):
        """A body without the endpoint's key is an error."""
        body = {"somethingElse": {"status": "SUCCESS", "data": 1}}

        result = unwrap("NativeBanking/services/accountDetails", body)

        assert result.error is True
        assert result.data is body

    def test_wrapper_for_other_endpoint_is_not_used(self):
        """Only the key derived from the requested endpoint counts."""
        body = {"loginv2": {"status": "SUCCESS", "data": {}}}

        assert unwrap("MFA/services/riskCheck", body).error is True

    @pytest.mark.parametrize("body", [[], None, "FAILED", 42])
    def test_non_object_bodies(self, body):
        """Bodies that are not JSON objects are errors, returned as is."""
        result = unwrap("NativeBanking/services/transfer", body)

        assert result.error is True
        assert result.data == body

    def test_status_is_case_sensitive(self):
        """Only the exact string SUCCESS counts as success."""
        body = {"transfer": {"status": "success", "data": {}}}

        assert unwrap("NativeBanking/services/transfer", body).error is True

    def test_success_without_data(self):
        """A SUCCESS wrapper without data resolves to None."""
        body = {"transfer": {"status": "SUCCESS"}}

        result = unwrap("NativeBanking/services/transfer", body)

        assert result.error is False
        assert result.data is None


class TestExtractSessionCookie:
    """Tests for picking the session token out of response headers."""

    def test_first_set_cookie_name_value(self):
        """The first Set-Cookie header is trimmed to name=value."""
        headers = [
            {"name": "Content-Type", "value": "application/json"},
            {"name": "Set-Cookie", "value": "JSESSIONID=abc123; Path=/; Secure; HttpOnly"},
            {"name": "Set-Cookie", "value": "other=1; Path=/"},
        ]

        assert extract_session_cookie(headers) == "JSESSIONID=abc123"

    def test_header_name_case_insensitive(self):
        """Lower-cased header names are matched too."""
        headers = [{"name": "set-cookie", "value": "token=xyz"}]

        assert extract_session_cookie(headers) == "token=xyz"

    def test_no_cookie(self):
        """No Set-Cookie header gives None."""
        assert extract_session_cookie([{"name": "Server", "value": "nginx"}]) is None
        assert extract_session_cookie([]) is None


class TestFormatTransferDate:
    """Tests for the transfer date format."""

    def test_explicit_date(self):
        """Dates are formatted as YYYY-MM-DD with zero padding."""
        assert format_transfer_date(date(2024, 3, 7)) == "2024-03-07"

    def test_defaults_to_today(self):
        """Without an argument, today's local date is used."""
        assert format_transfer_date() == date.today().strftime("%Y-%m-%d")


class TestCSVWriter:
    """Tests for CSV export."""

    def test_required_fields_first_then_extras(self, tmp_path):
        """Required columns keep their order; extra keys are appended."""
        writer = CSVWriter(tmp_path / "out")
        rows = [
            {"B": 2, "A": 1, "extra": "x"},
            {"A": 3, "B": 4, "more": "y"},
        ]

        path = writer.write(rows, "rows.csv", fieldnames=["A", "B"])

        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.reader(f)
            header = next(reader)
            data = list(reader)

        assert header == ["A", "B", "extra", "more"]
        assert data[0] == ["1", "2", "x", ""]
        assert data[1] == ["3", "4", "", "y"]

    def test_creates_output_directory(self, tmp_path):
        """The output directory is created on construction."""
        CSVWriter(tmp_path / "a" / "b")

        assert (tmp_path / "a" / "b").is_dir()

    def test_no_rows_writes_nothing(self, tmp_path):
        """An empty row list does not create a file."""
        writer = CSVWriter(tmp_path)

        assert writer.write([], "empty.csv", fieldnames=["A"]) is None
        assert not (tmp_path / "empty.csv").exists()
