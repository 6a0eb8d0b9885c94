from enum import Enum
from typing import Optional

from pydantic import Field

from driveoptima.schemas.hierarchy import DriveModel


class AnalysisMode(str, Enum):
    """Scope hint for an analysis run; the report schema is the same for both"""
    DEEP = "deep"
    WEEKLY = "weekly"


class RecommendationType(str, Enum):
    """Kinds of change the classifier may suggest"""
    RENAME = "RENAME"
    MOVE = "MOVE"
    CONSOLIDATE = "CONSOLIDATE"
    ARCHIVE = "ARCHIVE"


class Recommendation(DriveModel):
    """One atomic suggested change with its rationale"""
    id: str
    type: RecommendationType
    file_id: Optional[str] = None
    folder_id: Optional[str] = None
    current_path: str = ""
    suggested_name: Optional[str] = None
    suggested_folder_id: Optional[str] = None
    reasoning: str
    impact_score: float = Field(ge=1, le=100)


class ReportStats(DriveModel):
    """Aggregate redundancy figures for a report"""
    redundant_folders: int
    misnamed_files: int
    potential_space_saved: str


class OptimizationReport(DriveModel):
    """Structured result of one analysis run"""
    summary: str
    recommendations: list[Recommendation]
    stats: ReportStats

    def recommendation_ids(self) -> list[str]:
        return [rec.id for rec in self.recommendations]

    def get(self, recommendation_id: str) -> Optional[Recommendation]:
        for rec in self.recommendations:
            if rec.id == recommendation_id:
                return rec
        return None
