"""Upload of generated containers to the OpenAI Files API."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import httpx

LOGGER = logging.getLogger(__name__)

OPENAI_FILES_URL = "https://api.openai.com/v1/files"
API_KEY_ENV = "OPENAI_API_KEY"
DEFAULT_PURPOSE = "assistants"
_TIMEOUT_SECONDS = 60.0


@dataclass(slots=True)
class UploadResult:
    path: Path
    ok: bool
    file_id: Optional[str] = None
    detail: Optional[str] = None


def resolve_api_key(explicit: Optional[str], *, requested: bool) -> Optional[str]:
    """Pick the API key for an upload, or ``None`` when the upload is skipped.

    An explicit key always wins. When an upload was requested without one the
    ``OPENAI_API_KEY`` environment variable is consulted.
    """

    if explicit:
        LOGGER.info("Uploading with provided API key.")
        return explicit
    if not requested:
        LOGGER.info("No upload option provided. Skipping upload.")
        return None
    env_key = os.getenv(API_KEY_ENV, "").strip()
    if env_key:
        LOGGER.info("Uploading with API key from environment variable.")
        return env_key
    LOGGER.warning("API key not specified and not found in environment. Skipping upload.")
    return None


def upload_file(
    path: Path,
    api_key: str,
    *,
    purpose: str = DEFAULT_PURPOSE,
    client: Optional[httpx.Client] = None,
) -> UploadResult:
    """Send one container as ``text/plain`` multipart upload."""

    path = Path(path)
    owns_client = client is None
    http = client or httpx.Client(timeout=_TIMEOUT_SECONDS)
    try:
        with path.open("rb") as handle:
            response = http.post(
                OPENAI_FILES_URL,
                headers={"Authorization": f"Bearer {api_key}"},
                files={"file": (path.name, handle, "text/plain")},
                data={"purpose": purpose},
            )
    except (httpx.HTTPError, OSError) as error:
        LOGGER.warning("Failed to upload %s: %s", path, error)
        return UploadResult(path=path, ok=False, detail=str(error))
    finally:
        if owns_client:
            http.close()

    if response.is_success:
        file_id = None
        try:
            payload = response.json()
            if isinstance(payload, dict):
                file_id = payload.get("id")
        except ValueError:
            LOGGER.debug("Upload response for %s was not JSON", path)
        LOGGER.info("File %s uploaded successfully as %s", path, file_id)
        return UploadResult(path=path, ok=True, file_id=file_id)

    LOGGER.warning("Failed to upload %s: HTTP %s %s", path, response.status_code, response.text)
    return UploadResult(path=path, ok=False, detail=f"HTTP {response.status_code}: {response.text}")


def upload_files(
    paths: Iterable[Path],
    api_key: str,
    *,
    purpose: str = DEFAULT_PURPOSE,
    client: Optional[httpx.Client] = None,
) -> List[UploadResult]:
    owns_client = client is None
    http = client or httpx.Client(timeout=_TIMEOUT_SECONDS)
    try:
        return [upload_file(path, api_key, purpose=purpose, client=http) for path in paths]
    finally:
        if owns_client:
            http.close()
