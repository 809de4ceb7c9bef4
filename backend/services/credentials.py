"""Google service account credential loading."""
import asyncio
import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from config import Settings, get_settings

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


class CredentialsError(Exception):
    """Raised when Google credentials are missing or unusable."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def credentials_source(settings: Optional[Settings] = None) -> Optional[str]:
    """Name the env var credentials will be read from, or None."""
    settings = settings or get_settings()
    if settings.google_credentials_base64:
        return "GOOGLE_CREDENTIALS_BASE64"
    if settings.google_application_credentials:
        return "GOOGLE_APPLICATION_CREDENTIALS"
    return None


def load_service_account_info(settings: Optional[Settings] = None) -> dict:
    """
    Load the service account JSON.

    GOOGLE_CREDENTIALS_BASE64 takes precedence over
    GOOGLE_APPLICATION_CREDENTIALS.
    """
    settings = settings or get_settings()

    if settings.google_credentials_base64:
        source = "GOOGLE_CREDENTIALS_BASE64"
        try:
            raw = base64.b64decode(settings.google_credentials_base64, validate=False)
            info = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise CredentialsError(f"GOOGLE_CREDENTIALS_BASE64 is not valid base64 JSON: {e}")

    elif settings.google_application_credentials:
        path = Path(settings.google_application_credentials)
        source = f"Credentials file {path}"
        try:
            info = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise CredentialsError(f"Cannot read credentials file {path}: {e}")
        except ValueError as e:
            raise CredentialsError(f"Credentials file {path} is not valid JSON: {e}")

    else:
        raise CredentialsError(
            "No Google credentials configured "
            "(set GOOGLE_CREDENTIALS_BASE64 or GOOGLE_APPLICATION_CREDENTIALS)"
        )

    if not isinstance(info, dict):
        raise CredentialsError(f"{source} must hold a JSON object, got {type(info).__name__}")
    return info


def build_credentials(settings: Optional[Settings] = None) -> service_account.Credentials:
    """Build scoped service account credentials."""
    info = load_service_account_info(settings)
    try:
        return service_account.Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)
    except (ValueError, KeyError) as e:
        raise CredentialsError(f"Invalid service account credentials: {e}")


async def get_access_token(settings: Optional[Settings] = None) -> str:
    """Fetch a fresh OAuth access token for the Sheets API."""
    creds = build_credentials(settings)
    logger.debug(f"Refreshing access token via {credentials_source(settings)}")
    try:
        # google-auth only ships a blocking transport
        await asyncio.to_thread(creds.refresh, Request())
    except GoogleAuthError as e:
        raise CredentialsError(f"Failed to obtain access token: {e}")
    return creds.token
