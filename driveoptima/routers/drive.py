from fastapi import APIRouter, Depends

from driveoptima.routers.auth import require_user
from driveoptima.schemas.hierarchy import FileTypeBucket, Hierarchy
from driveoptima.services.hierarchy import file_type_distribution
from driveoptima.services.session import session_service

router = APIRouter(prefix="/api/drive", tags=["drive"], dependencies=[Depends(require_user)])


@router.get("", response_model=Hierarchy)
async def get_drive():
    """
    Return the folder/file snapshot under analysis
    """
    return session_service.hierarchy


@router.get("/stats", response_model=list[FileTypeBucket])
async def get_drive_stats():
    """
    Count files per type bucket for the distribution chart
    """
    return file_type_distribution(session_service.hierarchy)
