"""
Google Sheets reader.

Reads the intake responses with a service account through the Sheets v4
values endpoint.
https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/get
"""

import json
from typing import Optional
from urllib.parse import quote

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2.service_account import Credentials
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config.logging import logger
from config.settings import ConfigurationError, settings
from processing.models import FormRow

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


class SheetsReadError(Exception):
    """The spreadsheet could not be read."""


def load_credentials(service_account_key: str) -> Credentials:
    """
    Build read-only credentials from a service-account JSON string.

    Raises:
        ConfigurationError: key is not valid service-account JSON
    """
    try:
        info = json.loads(service_account_key)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"GAPI_SERVICE_ACCOUNT_KEY is not valid JSON: {e}. "
            "Paste the full service-account key file contents."
        ) from e

    try:
        return Credentials.from_service_account_info(info, scopes=SCOPES)
    except (KeyError, ValueError) as e:
        raise ConfigurationError(f"GAPI_SERVICE_ACCOUNT_KEY is not a usable service-account key: {e}") from e


class GoogleSheetsReader:
    """
    Reads a fixed range of a spreadsheet as FormRows.

    Usage:
        reader = GoogleSheetsReader(settings.GAPI_SERVICE_ACCOUNT_KEY)
        rows = reader.read_rows(settings.GOOGLE_SHEET_ID, settings.SHEET_RANGE)
    """

    BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"

    def __init__(
        self,
        service_account_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[int] = None,
    ):
        self.timeout = timeout or settings.REQUEST_TIMEOUT

        if session is None:
            credentials = load_credentials(service_account_key or settings.GAPI_SERVICE_ACCOUNT_KEY)
            session = AuthorizedSession(credentials)
            retry_strategy = Retry(
                total=settings.HTTP_RETRY_ATTEMPTS,
                backoff_factor=settings.HTTP_BACKOFF_FACTOR,
                status_forcelist=[429, 500, 502, 503, 504],
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("https://", adapter)

        self.session = session

    def read_rows(self, sheet_id: str, cell_range: Optional[str] = None) -> list[FormRow]:
        """
        Read every row in ``cell_range`` in sheet order.

        Trailing empty cells are absent from the API response, so rows have
        uneven lengths. Each FormRow remembers its 0-based position within
        the range.

        Raises:
            SheetsReadError: transport failure, non-2xx response, or malformed body
        """
        cell_range = cell_range or settings.SHEET_RANGE
        url = f"{self.BASE_URL}/{sheet_id}/values/{quote(cell_range, safe='')}"

        try:
            response = self.session.get(url, timeout=self.timeout)
        except (requests.exceptions.RequestException, GoogleAuthError) as e:
            raise SheetsReadError(f"Could not reach Google Sheets: {e}") from e

        if not response.ok:
            raise SheetsReadError(
                f"Google Sheets returned {response.status_code} for range {cell_range}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise SheetsReadError(f"Google Sheets returned a non-JSON body: {e}") from e

        values = body.get("values") or []
        if not isinstance(values, list):
            raise SheetsReadError("Google Sheets response 'values' is not a list")

        rows = [FormRow(cells, position=position) for position, cells in enumerate(values)]
        logger.info(f"Read {len(rows)} rows from sheet range {cell_range}")
        return rows
