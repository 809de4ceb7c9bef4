"""Google Sheets v4 REST client."""
import httpx
import logging
from typing import Awaitable, Callable, Optional
from urllib.parse import quote

from config import Settings, get_settings
from services.credentials import get_access_token

logger = logging.getLogger(__name__)

SHEETS_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"

# Served when USE_MOCK_DATA is on
MOCK_SHEET_TITLE = "mock"
MOCK_ROWS = [
    ["病院コード", "病院名"],
    ["H00001", "A病院"],
    ["H00002", "AB病院"],
]


class SheetsAPIError(Exception):
    """Exception for Sheets API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, status: str = "UNKNOWN"):
        self.message = message
        self.status_code = status_code
        self.status = status
        super().__init__(f"{status}: {message}")

    @property
    def is_range_parse_error(self) -> bool:
        return self.status_code == 400 and "unable to parse range" in self.message.lower()


def qualify_range(sheet_title: str, range_: str) -> str:
    """Prefix the A1 part of a range with a quoted sheet title."""
    a1 = range_.rsplit("!", 1)[-1]
    escaped = sheet_title.replace("'", "''")
    return f"'{escaped}'!{a1}"


class SheetsClient:
    """Client for a single spreadsheet."""

    def __init__(
        self,
        spreadsheet_id: Optional[str] = None,
        settings: Optional[Settings] = None,
        token_provider: Optional[Callable[[], Awaitable[str]]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.spreadsheet_id = spreadsheet_id or self.settings.spreadsheet_id
        if not self.spreadsheet_id:
            raise SheetsAPIError("SPREADSHEET_ID is not set")
        self.base_url = f"{SHEETS_BASE_URL}/{self.spreadsheet_id}"
        self.token_provider = token_provider or (lambda: get_access_token(self.settings))
        self.transport = transport

    async def _request(self, method: str, endpoint: str, **kwargs) -> dict:
        """Make an authenticated request to the Sheets API."""
        token = await self.token_provider()
        headers = {"Authorization": f"Bearer {token}"}
        url = f"{self.base_url}{endpoint}"

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.sheets_timeout, transport=self.transport
            ) as client:
                response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Sheets API request failed: {e}")
            raise SheetsAPIError(f"Request to Sheets API failed: {e}")

        if response.is_error:
            raise _error_from_response(response)
        return response.json()

    async def get_values(self, range_: str) -> dict:
        """
        Read a range of cell values.

        Returns the raw ValueRange: {"range", "majorDimension", "values"}.
        "values" is absent when the range is empty.
        """
        return await self._request(
            "GET",
            f"/values/{quote(range_, safe='')}",
            params={"majorDimension": "ROWS"},
        )

    async def get_metadata(self) -> dict:
        """Get spreadsheet title and per-sheet properties."""
        return await self._request(
            "GET",
            "",
            params={"fields": "spreadsheetId,properties.title,sheets.properties"},
        )

    async def list_sheet_titles(self) -> list[str]:
        """Get sheet (tab) titles in display order."""
        data = await self._request("GET", "", params={"fields": "sheets.properties.title"})
        return [s.get("properties", {}).get("title", "") for s in data.get("sheets", [])]

    async def read_range(self, range_: str) -> dict:
        """
        Read a range, falling back to the first sheet's tab on a parse error.

        Retries at most once.
        """
        try:
            return await self.get_values(range_)
        except SheetsAPIError as e:
            if not e.is_range_parse_error:
                raise
            titles = await self.list_sheet_titles()
            if not titles:
                raise
            qualified = qualify_range(titles[0], range_)
            logger.warning(f"Range {range_!r} did not parse, retrying as {qualified!r}")
            return await self.get_values(qualified)


def _error_from_response(response: httpx.Response) -> SheetsAPIError:
    """Build an error from Google's {"error": {...}} envelope."""
    try:
        data = response.json()
    except ValueError:
        data = {}
    error = data.get("error", {}) if isinstance(data, dict) else {}
    if not isinstance(error, dict):
        error = {"message": str(error)}
    message = error.get("message") or response.text or response.reason_phrase
    status = error.get("status", "UNKNOWN")
    logger.error(f"Sheets API error {response.status_code} {status}: {message}")
    return SheetsAPIError(message, response.status_code, status)


def get_sheets_client() -> SheetsClient:
    """Create a Sheets client for the configured spreadsheet."""
    return SheetsClient()


async def read_hospital_range(range_: Optional[str] = None) -> dict:
    """
    Read the hospital sheet as a ValueRange dict.

    Uses HOSPITAL_RANGE unless a range is given. Serves MOCK_ROWS when
    USE_MOCK_DATA is set.
    """
    settings = get_settings()
    range_ = range_ or settings.hospital_range

    if settings.use_mock_data:
        return {
            "range": qualify_range(MOCK_SHEET_TITLE, range_),
            "majorDimension": "ROWS",
            "values": [list(row) for row in MOCK_ROWS],
        }

    client = get_sheets_client()
    return await client.read_range(range_)
