from fastapi import APIRouter, Depends, HTTPException

from driveoptima.routers.auth import require_user
from driveoptima.schemas.report import RecommendationType
from driveoptima.schemas.session import AnalysisRequest, SessionView
from driveoptima.services.session import AnalysisFailed, NothingToApply, session_service

router = APIRouter(prefix="/api", tags=["session"])


@router.get("/session", response_model=SessionView)
async def get_session(user: str = Depends(require_user)):
    """
    Current report, selection and loading flags of the signed-in user
    """
    return session_service.view(user)


@router.post("/analysis", response_model=SessionView)
async def run_analysis(body: AnalysisRequest, user: str = Depends(require_user)):
    """
    Ask the classifier for a new optimization plan.

    On failure the previous report is kept and the error is returned:
    503 when the classifier is not configured, 502 otherwise.
    """
    try:
        return await session_service.run_analysis(user, body.mode)
    except AnalysisFailed as e:
        status_code = 503 if e.configuration else 502
        raise HTTPException(status_code=status_code, detail=f"Failed to analyze drive: {e}")


@router.post("/session/error/dismiss", response_model=SessionView)
async def dismiss_error(user: str = Depends(require_user)):
    return await session_service.dismiss_error(user)


@router.post("/recommendations/apply", response_model=SessionView)
async def apply_selected(user: str = Depends(require_user)):
    """
    Apply every selected recommendation
    """
    try:
        return await session_service.apply_changes(user)
    except NothingToApply as e:
        raise HTTPException(status_code=409, detail=str(e))


def _require_recommendation(user: str, recommendation_id: str):
    report = session_service.get(user).report
    if report is None or report.get(recommendation_id) is None:
        raise HTTPException(status_code=404, detail="Recommendation not found")
    return report.get(recommendation_id)


@router.post("/recommendations/{recommendation_id}/toggle", response_model=SessionView)
async def toggle_recommendation(recommendation_id: str, user: str = Depends(require_user)):
    """
    Add or remove a recommendation from the selection (ignored once completed)
    """
    _require_recommendation(user, recommendation_id)
    return await session_service.toggle(user, recommendation_id)


@router.post("/recommendations/{recommendation_id}/apply", response_model=SessionView)
async def quick_apply(recommendation_id: str, user: str = Depends(require_user)):
    """
    Quick-apply a single RENAME recommendation
    """
    rec = _require_recommendation(user, recommendation_id)
    if rec.type != RecommendationType.RENAME:
        raise HTTPException(status_code=409, detail="Only RENAME recommendations can be quick-applied")
    return await session_service.quick_apply(user, recommendation_id)
