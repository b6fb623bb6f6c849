import logging
import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, ValidationError

from repcon.config import CondenseSettings
from repcon.logging_config import configure_logging
from repcon.paginate import CapacityTooSmallError, ContainerWriteError
from repcon.service import CondenseReport, condense
from repcon.sizing import SizeLimitExceededError

configure_logging(os.getenv("REPCON_LOG_LEVEL", "INFO"))

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Repo Condenser API")


class CondenseRequest(BaseModel):
    path_to_repo: str = Field(..., description="Repository root to condense.")
    output_directory: Optional[str] = Field(None, description="Directory receiving the containers.")
    output_name: Optional[str] = Field(None, description="Base name of the generated containers.")
    ignore_patterns: List[str] = Field(default_factory=list)
    include_hidden: bool = False
    max_files: Optional[int] = Field(None, ge=1)
    max_file_size: Optional[int] = Field(None, ge=1, description="Container capacity in bytes.")


class FileWarningItem(BaseModel):
    file: str
    stage: str
    reason: str


class CondenseResponse(BaseModel):
    containers: List[str]
    warnings: List[FileWarningItem]
    file_count: int
    total_size: int
    total_size_human: str


def _serialize_report(report: CondenseReport) -> CondenseResponse:
    return CondenseResponse(
        containers=[str(path) for path in report.containers],
        warnings=[
            FileWarningItem(file=warning.identifier, stage=warning.stage.value, reason=warning.reason)
            for warning in report.warnings
        ],
        file_count=report.file_count,
        total_size=report.total_size,
        total_size_human=report.total_size_human,
    )


@app.get("/", response_class=PlainTextResponse)
def read_root() -> str:
    """Healthcheck endpoint for the service."""
    return "ok"


@app.get("/healthz", response_class=PlainTextResponse)
def healthcheck() -> str:
    """Liveness probe used by container orchestrators."""
    return "ok"


@app.post("/condense", response_model=CondenseResponse)
def condense_repository(request: CondenseRequest) -> CondenseResponse:
    """Condense a repository on the server's filesystem into containers."""

    try:
        settings = CondenseSettings.from_env(
            path_to_repo=request.path_to_repo,
            output_directory=request.output_directory,
            output_name=request.output_name,
            ignore_patterns=request.ignore_patterns or None,
            include_hidden=request.include_hidden,
            max_files=request.max_files,
            max_file_size=request.max_file_size,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        report = condense(settings)
    except SizeLimitExceededError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    except (CapacityTooSmallError, NotADirectoryError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ContainerWriteError as exc:
        LOGGER.exception("Container write failed for %s", request.path_to_repo)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return _serialize_report(report)
