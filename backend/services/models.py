"""Shared models for services."""
from pydantic import BaseModel
from typing import Optional


class HospitalRecord(BaseModel):
    """A hospital code and its display name."""
    code: str
    name: str


class HeaderLayout(BaseModel):
    """Where the header row and its label columns were found."""
    row_index: int
    name_column: int
    code_column: int


class LookupResult(BaseModel):
    """A matched record and how it was found."""
    record: HospitalRecord
    method: str  # header, neighbor
    row_index: int
    header: Optional[HeaderLayout] = None


class ErrorResponse(BaseModel):
    """Error body shared by every endpoint."""
    error: str
