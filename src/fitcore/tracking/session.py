"""
In-memory GPS tracking sessions.

A TrackingSession buffers the samples a device reports during a workout and
hands them to analyze_route() when asked. SessionRegistry keeps sessions by
id and enforces a single current (recording) session.

Neither class talks to a location API: the caller pushes samples in via
record_waypoint().
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fitcore.analysis.geo import GPSSample
from fitcore.analysis.route import RouteStats, analyze_route
from fitcore.config import get_settings

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session id is not known to the registry."""


class TrackingSession:
    """
    Buffer of samples for one workout.

    Waypoints are ignored while the session is paused or stopped, and fixes
    whose accuracy is worse than waypoint_max_accuracy_m are dropped.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        waypoint_max_accuracy_m: Optional[float] = None,
    ):
        settings = get_settings()
        self.session_id = session_id or uuid.uuid4().hex
        self.waypoint_max_accuracy_m = (
            waypoint_max_accuracy_m
            if waypoint_max_accuracy_m is not None
            else settings.waypoint_max_accuracy_m
        )
        self.samples: List[GPSSample] = []
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.is_active = False
        self.is_paused = False

    def start(self, initial: Optional[GPSSample] = None) -> None:
        """
        Begin a fresh recording. Samples and end_time from an earlier run are
        discarded. The initial fix is kept as-is, without the accuracy check.
        """
        self.samples = [initial] if initial is not None else []
        self.start_time = datetime.now(timezone.utc)
        self.end_time = None
        self.is_active = True
        self.is_paused = False
        logger.info("Tracking session %s started", self.session_id)

    def pause(self) -> None:
        self.is_paused = True
        logger.info("Tracking session %s paused", self.session_id)

    def resume(self) -> None:
        self.is_paused = False
        logger.info("Tracking session %s resumed", self.session_id)

    def stop(self) -> None:
        self.is_active = False
        self.end_time = datetime.now(timezone.utc)
        logger.info(
            "Tracking session %s stopped with %d samples",
            self.session_id,
            len(self.samples),
        )

    def record_waypoint(self, sample: GPSSample) -> bool:
        """
        Append a sample if the session is recording and the fix is good enough.

        Returns:
            True if the sample was kept.
        """
        if not self.is_active or self.is_paused:
            return False

        if sample.accuracy is not None and sample.accuracy > self.waypoint_max_accuracy_m:
            logger.warning(
                "Waypoint accuracy too low (%.1f m), skipping", sample.accuracy
            )
            return False

        self.samples.append(sample)
        return True

    def analyze(
        self,
        user_weight: Optional[float] = None,
        activity_type: Optional[str] = None,
    ) -> RouteStats:
        """
        Run route analysis over everything recorded so far.

        Wall-clock time runs from start() to stop(), or to now while still
        recording. Weight and activity default to the configured values.
        """
        settings = get_settings()
        start = self.start_time or datetime.now(timezone.utc)
        end = self.end_time or datetime.now(timezone.utc)
        return analyze_route(
            self.samples,
            start,
            end,
            user_weight=user_weight if user_weight is not None else settings.user_weight_kg,
            activity_type=activity_type or settings.activity_type,
            split_distance=settings.split_distance_m,
        )


class SessionRegistry:
    """Sessions by id; at most one of them is the current recording session."""

    def __init__(self):
        self._sessions: Dict[str, TrackingSession] = {}
        self._current_id: Optional[str] = None

    def start_session(self, initial: Optional[GPSSample] = None) -> TrackingSession:
        """Start a new session, stopping whichever one was current."""
        if self._current_id is not None:
            self.stop_session(self._current_id)

        session = TrackingSession()
        session.start(initial)
        self._sessions[session.session_id] = session
        self._current_id = session.session_id
        return session

    def get(self, session_id: str) -> TrackingSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def current(self) -> Optional[TrackingSession]:
        if self._current_id is None:
            return None
        return self._sessions.get(self._current_id)

    def stop_session(self, session_id: str) -> TrackingSession:
        """Stop a session. It stays in the registry for later retrieval."""
        session = self.get(session_id)
        session.stop()
        if self._current_id == session_id:
            self._current_id = None
        return session

    def pause_session(self, session_id: str) -> None:
        self.get(session_id).pause()

    def resume_session(self, session_id: str) -> None:
        self.get(session_id).resume()

    def record_waypoint(self, session_id: str, sample: GPSSample) -> bool:
        return self.get(session_id).record_waypoint(sample)

    def clear_session(self, session_id: str) -> None:
        """Forget a session entirely; it is no longer retrievable."""
        if session_id not in self._sessions:
            raise SessionNotFoundError(session_id)
        del self._sessions[session_id]
        if self._current_id == session_id:
            self._current_id = None
        logger.info("Tracking session %s cleared", session_id)
