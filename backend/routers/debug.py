"""Diagnostic endpoints exposing configuration and raw Sheets responses."""
import logging
from fastapi import APIRouter, HTTPException, Query
from typing import Optional

from config import get_settings
from services.credentials import CredentialsError, credentials_source
from services.sheets import SheetsAPIError, get_sheets_client, read_hospital_range

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/env")
async def debug_env():
    """Show configuration state. Secrets are reported by presence only."""
    settings = get_settings()
    return {
        "spreadsheet_id_set": bool(settings.spreadsheet_id),
        "spreadsheet_id": settings.spreadsheet_id or None,
        "hospital_range": settings.hospital_range,
        "credentials_source": credentials_source(settings),
        "google_application_credentials": settings.google_application_credentials or None,
        "credentials_base64_length": len(settings.google_credentials_base64),
        "mock_data": settings.use_mock_data,
    }


@router.get("/sheets")
async def debug_sheets():
    """Raw spreadsheet metadata (sheet titles, ids, grid sizes)."""
    try:
        client = get_sheets_client()
        return await client.get_metadata()
    except (SheetsAPIError, CredentialsError) as e:
        raise HTTPException(status_code=500, detail=e.message)
    except Exception as e:
        logger.exception("Debug metadata read failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/sheet")
async def debug_sheet(range_: Optional[str] = Query(None, alias="range")):
    """
    Raw values for a range.

    - **range**: A1 range to read (defaults to HOSPITAL_RANGE)
    """
    requested = range_ or get_settings().hospital_range
    try:
        data = await read_hospital_range(requested)
    except (SheetsAPIError, CredentialsError) as e:
        raise HTTPException(status_code=500, detail=e.message)
    except Exception as e:
        logger.exception("Debug sheet read failed")
        raise HTTPException(status_code=500, detail=str(e))

    values = data.get("values", [])
    return {
        "requested_range": requested,
        "resolved_range": data.get("range"),
        "row_count": len(values),
        "raw": data,
    }
