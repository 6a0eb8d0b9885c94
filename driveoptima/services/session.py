"""
Session state management for DriveOptima.

Each signed-in user owns a SessionState: the current report, the selected and
completed recommendation ids, and the loading flags. SessionState is
immutable; the module-level transition functions take a state and return the
next one, and SessionService is the only place that stores the result.

Analysis requests carry a monotonic token. Only the response to the most
recently issued request may update a session; responses for superseded
requests are dropped.
"""

import asyncio
import itertools
import logging
import time
from typing import Awaitable, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict

from driveoptima.config import Settings, get_settings
from driveoptima.schemas.hierarchy import Hierarchy
from driveoptima.schemas.report import AnalysisMode, OptimizationReport, RecommendationType
from driveoptima.schemas.session import SessionView
from driveoptima.services.classifier import (
    Classifier,
    ClassifierConfigurationError,
    GeminiClassifier,
    StaticClassifier,
    demo_report,
    ownership_violations,
)
from driveoptima.services.hierarchy import HierarchyProvider, MockHierarchyProvider, file_type_distribution

logger = logging.getLogger(__name__)


class SessionState(BaseModel):
    """Snapshot of one user's dashboard state"""
    model_config = ConfigDict(frozen=True)

    user: str
    report: Optional[OptimizationReport] = None
    mode: Optional[AnalysisMode] = None
    selected: frozenset[str] = frozenset()
    completed: frozenset[str] = frozenset()
    pending_token: Optional[int] = None
    report_token: Optional[int] = None
    applying: bool = False
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.pending_token is not None


def sign_in(user: str) -> SessionState:
    return SessionState(user=user)


def sign_out(state: SessionState) -> SessionState:
    """Drop report, selection and completion; keep nothing but the identity."""
    return SessionState(user=state.user)


def begin_analysis(state: SessionState, mode: AnalysisMode, token: int) -> SessionState:
    return state.model_copy(update={"pending_token": token, "mode": mode, "error": None})


def analysis_succeeded(state: SessionState, token: int, report: OptimizationReport) -> SessionState:
    """
    Install a fresh report.

    Every recommendation of the new report starts selected. Completed ids
    from earlier reports are kept.

    Args:
        state: Current state
        token: Token issued by begin_analysis for this request
        report: Classifier output

    Returns:
        The next state, or the unchanged state when the token is stale
    """
    if token != state.pending_token:
        return state
    return state.model_copy(update={
        "report": report,
        "selected": frozenset(report.recommendation_ids()),
        "pending_token": None,
        "report_token": token,
    })


def analysis_failed(state: SessionState, token: int, message: str) -> SessionState:
    """Leave the previous report untouched and stop loading."""
    if token != state.pending_token:
        return state
    return state.model_copy(update={"pending_token": None, "error": message})


def toggle_recommendation(state: SessionState, recommendation_id: str) -> SessionState:
    if state.report is None or state.report.get(recommendation_id) is None:
        return state
    if recommendation_id in state.completed:
        return state
    return state.model_copy(update={"selected": state.selected ^ {recommendation_id}})


def begin_apply(state: SessionState) -> SessionState:
    if not state.selected:
        return state
    return state.model_copy(update={"applying": True})


def apply_selected(state: SessionState, ids: Optional[frozenset[str]] = None) -> SessionState:
    """
    Mark recommendations as completed.

    Args:
        state: Current state
        ids: Ids captured when the apply started, defaults to the current selection

    Returns:
        The next state; unchanged when there is nothing to apply
    """
    ids = state.selected if ids is None else ids
    if not ids:
        return state
    return state.model_copy(update={"completed": state.completed | ids, "applying": False})


def quick_apply(state: SessionState, recommendation_id: str) -> SessionState:
    """Complete a single RENAME without touching the selection."""
    if state.report is None or recommendation_id in state.completed:
        return state
    rec = state.report.get(recommendation_id)
    if rec is None or rec.type != RecommendationType.RENAME:
        return state
    return state.model_copy(update={"completed": state.completed | {recommendation_id}})


def dismiss_error(state: SessionState) -> SessionState:
    return state.model_copy(update={"error": None})


class AnalysisFailed(Exception):
    """An analysis request did not produce a report"""

    def __init__(self, message: str, configuration: bool = False):
        super().__init__(message)
        self.configuration = configuration


class NothingToApply(Exception):
    """Apply was requested with an empty selection"""


Notifier = Callable[[str, str, dict], Awaitable[None]]


class SessionService:
    """
    Service holding the drive snapshot and every user's session.

    This service:
    - Loads one hierarchy snapshot from the provider
    - Runs analyses through the classifier capability
    - Applies reducer transitions and stores the resulting states
    - Pushes the updated session view to the notifier after every change
    """

    def __init__(
        self,
        provider: HierarchyProvider,
        classifier: Classifier,
        apply_delay: float = 2.0,
        notifier: Optional[Notifier] = None,
    ):
        self.provider = provider
        self.classifier = classifier
        self.apply_delay = apply_delay
        self.notifier = notifier
        self.hierarchy: Hierarchy = provider.generate()
        self.sessions: Dict[str, SessionState] = {}
        self._tokens = itertools.count(1)

    def get(self, user: str) -> SessionState:
        if user not in self.sessions:
            self.sessions[user] = sign_in(user)
        return self.sessions[user]

    def view(self, user: str) -> SessionView:
        """
        Project a session into the shape rendered by the dashboard.

        Selected and completed ids are listed in report order; completed ids
        left over from earlier reports follow in sorted order.

        Args:
            user: Signed-in identity

        Returns:
            SessionView
        """
        state = self.sessions.get(user) or sign_in(user)
        order = state.report.recommendation_ids() if state.report else []
        leftovers = sorted(state.completed - set(order))
        return SessionView(
            user=user,
            loading=state.loading,
            applying=state.applying,
            mode=state.mode,
            report=state.report,
            selected=[rec_id for rec_id in order if rec_id in state.selected],
            completed=[rec_id for rec_id in order if rec_id in state.completed] + leftovers,
            error=state.error,
            file_types=file_type_distribution(self.hierarchy),
        )

    async def _commit(self, user: str, state: SessionState):
        self.sessions[user] = state
        if self.notifier is not None:
            await self.notifier(user, "session", self.view(user).model_dump(mode="json", by_alias=True))

    async def sign_in(self, user: str) -> SessionView:
        await self._commit(user, self.get(user))
        logger.info(f"Signed in: {user}")
        return self.view(user)

    async def sign_out(self, user: str):
        """Forget everything about a user's session."""
        if user in self.sessions:
            await self._commit(user, sign_out(self.sessions[user]))
            del self.sessions[user]
        logger.info(f"Signed out: {user}")

    async def run_analysis(self, user: str, mode: AnalysisMode) -> SessionView:
        """
        Analyze the drive and install the resulting report.

        Args:
            user: Signed-in identity
            mode: Deep or weekly scope hint

        Returns:
            SessionView after the report is installed

        Raises:
            AnalysisFailed: The classifier raised; the previous report is kept
        """
        start_time = time.time()
        token = next(self._tokens)
        await self._commit(user, begin_analysis(self.get(user), mode, token))

        try:
            report = await self.classifier.analyze(self.hierarchy, mode)
        except Exception as e:
            logger.error(f"Analysis {token} failed for {user}: {e}")
            current = self.sessions.get(user)
            if current is not None:
                await self._commit(user, analysis_failed(current, token, str(e)))
            raise AnalysisFailed(str(e), configuration=isinstance(e, ClassifierConfigurationError)) from e

        violations = ownership_violations(self.hierarchy, report)
        if violations:
            logger.warning(
                f"Report touches entities not owned by {user}: {[rec.id for rec in violations]}"
            )

        current = self.sessions.get(user)
        if current is None or current.pending_token != token:
            # Signed out meanwhile, or superseded by a newer request
            logger.warning(f"Dropping stale analysis {token} for {user}")
        else:
            await self._commit(user, analysis_succeeded(current, token, report))

        process_time = (time.time() - start_time) * 1000  # ms
        logger.info(f"Analysis {token} processed in {process_time:.2f}ms for {user}")
        return self.view(user)

    async def toggle(self, user: str, recommendation_id: str) -> SessionView:
        await self._commit(user, toggle_recommendation(self.get(user), recommendation_id))
        return self.view(user)

    async def quick_apply(self, user: str, recommendation_id: str) -> SessionView:
        await self._commit(user, quick_apply(self.get(user), recommendation_id))
        return self.view(user)

    async def apply_changes(self, user: str) -> SessionView:
        """
        Apply every selected recommendation after the simulated delay.

        Raises:
            NothingToApply: The selection is empty
        """
        state = self.get(user)
        if not state.selected:
            raise NothingToApply("No recommendations selected")

        ids = state.selected
        await self._commit(user, begin_apply(state))
        await asyncio.sleep(self.apply_delay)

        current = self.sessions.get(user)
        if current is None or current.report_token != state.report_token:
            # Signed out, possibly signed back in, or a new report replaced this one
            logger.warning(f"Session of {user} changed before changes were applied")
            if current is not None and current.applying:
                await self._commit(user, current.model_copy(update={"applying": False}))
        else:
            await self._commit(user, apply_selected(current, ids))
            logger.info(f"Applied {len(ids)} recommendations for {user}")
        return self.view(user)

    async def dismiss_error(self, user: str) -> SessionView:
        await self._commit(user, dismiss_error(self.get(user)))
        return self.view(user)


def create_session_service(settings: Settings) -> SessionService:
    """
    Build the session service described by the settings.

    Args:
        settings: Application settings

    Returns:
        SessionService using the mock drive and the configured classifier
    """
    if settings.classifier == "static":
        classifier: Classifier = StaticClassifier(report=demo_report())
    else:
        classifier = GeminiClassifier(api_key=settings.gemini_api_key, model=settings.gemini_model)
    return SessionService(
        provider=MockHierarchyProvider(),
        classifier=classifier,
        apply_delay=settings.apply_delay_seconds,
    )


# Global session service instance
session_service = create_session_service(get_settings())
