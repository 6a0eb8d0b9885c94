from typing import Optional

from pydantic import BaseModel

from driveoptima.schemas.hierarchy import DriveModel, FileTypeBucket
from driveoptima.schemas.report import AnalysisMode, OptimizationReport


class AnalysisRequest(DriveModel):
    """Body of an analysis request"""
    mode: AnalysisMode = AnalysisMode.DEEP


class LoginResponse(DriveModel):
    """Identity of the signed-in user"""
    user: Optional[str] = None


class SessionView(DriveModel):
    """Everything the dashboard needs to render one user's session"""
    user: str
    loading: bool
    applying: bool
    mode: Optional[AnalysisMode] = None
    report: Optional[OptimizationReport] = None
    selected: list[str]
    completed: list[str]
    error: Optional[str] = None
    file_types: list[FileTypeBucket]


class HealthResponse(BaseModel):
    status: str = "ok"
