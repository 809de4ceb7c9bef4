"""Hospital lookup endpoints."""
import logging
from fastapi import APIRouter, HTTPException
from typing import Optional

from services.credentials import CredentialsError
from services.hospital_lookup import lookup_hospital
from services.models import ErrorResponse, HospitalRecord
from services.sheets import SheetsAPIError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ping")
async def ping():
    """Liveness check."""
    return {"message": "pong"}


@router.get(
    "/hospital",
    response_model=HospitalRecord,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_hospital(code: Optional[str] = None):
    """
    Look up a hospital name by code.

    - **code**: Hospital code (e.g., H00001), trimmed before matching
    """
    code = (code or "").strip()
    if not code:
        raise HTTPException(status_code=400, detail="code required")

    try:
        result = await lookup_hospital(code)
    except (SheetsAPIError, CredentialsError) as e:
        raise HTTPException(status_code=500, detail=e.message)
    except Exception as e:
        logger.exception(f"Hospital lookup failed for {code!r}")
        raise HTTPException(status_code=500, detail=str(e))

    if result is None:
        raise HTTPException(status_code=404, detail="not found")

    return result.record
