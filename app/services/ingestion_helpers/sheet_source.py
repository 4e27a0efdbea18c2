# /exam-portal/app/services/ingestion_helpers/sheet_source.py

import re
from typing import Optional

import httpx

from ...core import config
from ...core.exceptions import PreconditionError

SHEET_ID_RE = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")
GID_RE = re.compile(r"gid=([0-9]+)")
EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"

FETCH_FAILED_MESSAGE = (
    'Could not fetch sheet. Make sure the sheet is published to web or shared as "Anyone with the link".'
)


def extract_sheet_id(url: str) -> Optional[str]:
    match = SHEET_ID_RE.search(url or "")
    return match.group(1) if match else None


def extract_gid(url: str) -> str:
    match = GID_RE.search(url or "")
    return match.group(1) if match else "0"


def build_export_url(sheet_url: str) -> str:
    """Turns any Google Sheets link into the CSV export URL of the same tab."""
    sheet_id = extract_sheet_id(sheet_url)
    if not sheet_id:
        raise PreconditionError("Invalid Google Sheet URL. Please use a valid Google Sheets link.")
    return EXPORT_URL.format(sheet_id=sheet_id, gid=extract_gid(sheet_url))


def fetch_sheet_csv(sheet_url: str) -> str:
    """Downloads the sheet tab as CSV text."""
    export_url = build_export_url(sheet_url)
    try:
        response = httpx.get(export_url, timeout=config.SHEET_FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        print(f"ERROR fetching Google Sheet '{export_url}': {e}")
        raise PreconditionError(FETCH_FAILED_MESSAGE) from e
    return response.text
