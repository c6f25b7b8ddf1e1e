import logging
from typing import Any, Dict, List, Union

from playwright.async_api import APIResponse

from .base import BankSession
from .errors import TransportError
from .models import Account, ApiResult
from .utils import extract_session_cookie, format_transfer_date

logger = logging.getLogger(__name__)

LOGIN_ENDPOINT = "Authenticator/services/loginv2"
RISK_CHECK_ENDPOINT = "MFA/services/riskCheck"
POST_AUTH_CONFIG_ENDPOINT = "MobileConfig/services/postAuthConfig"
MEMBER_SUMMARY_ENDPOINT = "ProfileService/services/memberSummary"
ACCOUNT_SUMMARY_ENDPOINT = "NativeBanking/services/accountSummary"
ACCOUNT_DETAILS_ENDPOINT = "NativeBanking/services/accountDetails"
SCHEDULED_TRANSFERS_ENDPOINT = "NativeBanking/services/scheduledTransfers"
TRANSFER_ACCOUNTS_ENDPOINT = "NativeBanking/services/transferAccountsList"
TRANSFER_ENDPOINT = "NativeBanking/services/transfer"

# Static device fingerprint submitted after every login. The server accepts
# any plausible values; none of these identify a real device.
RISK_CHECK_PAYLOAD: Dict[str, Any] = {
    "areaCode": "14140",
    "cellTowerId": "22633985",
    "deviceId": "abcdefge8aca29a5",
    "deviceModel": "Nexus 6P",
    "deviceName": "angler",
    "devicePhoneNumber": "4204201337",
    "deviceSysName": "Android",
    "deviceSysVer": "6.0.1",
    "geoLocation": {
        "geoAlt": 0,
        "geoHead": 0,
        "geoHorAcc": 0,
        "geoLat": 0,
        "geoLong": 0,
        "geoSpeed": 0,
        "geoStatus": 2,
        "geoTimestamp": 0,
    },
    "ipAddress": "192.0.0.4",
    "languages": "English",
    "macAddress": "02:00:00:00:00:00",
    "mcc": "310",
    "mnc": "260",
    "multitask": True,
    "osId": "397a78ee8aca29a5",
    "screenSize": "1440x2392",
    "simId": "66626097046666",
    "transType": "LGN",
    "wifiNetworksData": {
        "bbsid": "00:00:00:00:00:00",
        "signalStrength": -127,
        "ssid": "0x",
        "stationName": "-1",
    },
}


class NavyFederalSession(BankSession):
    """
    Navy Federal Credit Union mobile-banking API session.

    Speaks to the JSON API used by the Android app rather than the web site.

    Workflow:
    1.  Login: Posts the access number and password, keeps the session cookie
        from the response and submits the device risk check.
    2.  Queries: Member, account and transfer information is read with the
        stored cookie.
    3.  Transfers: Immediate one-time internal transfers between the member's
        own accounts.

    Every call returns an `ApiResult`. A failed login or an unknown account ID
    is reported through `ApiResult.error`, not raised.
    """

    def get_bank_name(self) -> str:
        return "nfcu"

    def on_response(self, endpoint: str, response: APIResponse):
        if endpoint != LOGIN_ENDPOINT:
            return
        token = extract_session_cookie(response.headers_array)
        if token:
            self._set_session_token(token)
            logger.debug("Stored session cookie from login response")

    async def login(self, access_number: str, password: str) -> ApiResult:
        """
        Log in with an access number and password.

        The risk check is always sent after the credentials, whatever the
        login outcome, and its own result is discarded. The login result is
        returned only once the risk check has finished. A transport failure
        on the credentials POST is raised after the risk check was sent.
        """
        device = self.config.device
        try:
            result = await self.post(LOGIN_ENDPOINT, {
                "appVersion": device.app_version,
                "deviceModel": device.device_model,
                "osPlatform": device.os_platform,
                "osVersion": device.os_version,
                "username": access_number,
                "password": password,
            })
        except TransportError:
            await self._risk_check()
            raise

        await self._risk_check()

        if result.success:
            logger.info("Logged in as %s", access_number)
        return result

    async def _risk_check(self):
        try:
            await self.post(RISK_CHECK_ENDPOINT, RISK_CHECK_PAYLOAD)
        except TransportError as e:
            logger.warning("Risk check failed, ignoring: %s", e)

    async def get_post_auth_config(self) -> ApiResult:
        """Configuration the app loads right after authentication."""
        return await self.get(POST_AUTH_CONFIG_ENDPOINT)

    async def get_member_summary(self) -> ApiResult:
        """Profile of the logged-in member (name, contact details)."""
        return await self.get(MEMBER_SUMMARY_ENDPOINT)

    async def get_account_summary(self) -> ApiResult:
        """Summary of all of the member's accounts."""
        return await self.get(ACCOUNT_SUMMARY_ENDPOINT)

    async def get_account_details(self, account_id: Union[str, int]) -> ApiResult:
        return await self.post(ACCOUNT_DETAILS_ENDPOINT, {"accountId": str(account_id)})

    async def get_scheduled_transfers(self, include_ach: bool = False) -> ApiResult:
        """Scheduled transfers; `include_ach` also lists ACH transfers."""
        return await self.get(SCHEDULED_TRANSFERS_ENDPOINT, {"ach": "y" if include_ach else "n"})

    async def get_transfer_accounts(self) -> ApiResult:
        """Accounts that can be transferred from or to."""
        return await self.get(TRANSFER_ACCOUNTS_ENDPOINT)

    async def transfer_now(self, from_account_id: str, to_account_id: str, amount: float) -> ApiResult:
        """
        Transfer money between two of the member's accounts today.

        Always an immediate, one-time, internal, non-ACH transfer dated with
        today's local date.
        """
        logger.info("Transferring %s from %s to %s", amount, from_account_id, to_account_id)
        return await self.post(TRANSFER_ENDPOINT, {
            "ach": False,
            "fromAccountId": from_account_id,
            "toAccountId": to_account_id,
            "transAmtType": "F",
            "transFreq": "Manually",
            "transferAmount": amount,
            "transferDate": format_transfer_date(),
            "transferType": "INTERNAL",
        })

    async def fetch_accounts(self) -> List[Account]:
        """Fetch the account summary and map it to Account records."""
        result = await self.get_account_summary()
        if result.error:
            logger.warning("Could not fetch account summary (status %s)", result.api_status)
            return []

        accounts = accounts_from_summary(result)
        logger.info("Found %d accounts.", len(accounts))
        return accounts


def accounts_from_summary(result: ApiResult) -> List[Account]:
    """Map a successful account summary result to Account records."""
    if result.error or not isinstance(result.data, dict):
        return []
    entries = result.data.get("accounts") or []
    return [Account.from_summary_entry(entry) for entry in entries if isinstance(entry, dict)]
