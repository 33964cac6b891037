"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Starts paced host reveals
4. Formats responses for the front end

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    ConfigureRequest,
    DoorRequest,
    DecideRequest,
    # Responses
    SessionResponse,
    ActionResponse,
    ErrorResponse,
    VariantListResponse,
    EndSessionResponse,
    # Shared
    VariantInfo,
    RoundState,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..engine_core import ActionResult, RoundSnapshot
from ..rules import VARIANTS, DEFAULT_VARIANT, VariantRules
from ..session import SessionManager, Session, StagedReveal

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest(variant="host_auto"))
        service.configure(session.session_id, ConfigureRequest(door_count=5))
        service.start_round(session.session_id)
        response = service.select_door(session.session_id, DoorRequest(door=0))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Seconds between host reveals; 0 reveals everything in one call
    reveal_delay: float = 0.0

    def list_variants(self) -> VariantListResponse:
        return VariantListResponse(
            variants=[self._variant_info(v) for v in VARIANTS.values()],
            default=DEFAULT_VARIANT,
        )

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new session.

        Raises ValueError for an unknown variant or out-of-range door count.
        """
        session = self.session_manager.create_session(
            variant=request.variant,
            door_count=request.door_count,
            player_name=request.player_name,
        )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> EndSessionResponse:
        session = self.session_manager.end_session(session_id, reason)
        if not session:
            return EndSessionResponse(success=False, session_id=session_id)
        return EndSessionResponse(
            success=True,
            session_id=session_id,
            status=SessionStatus(session.state.value),
        )

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Round operations
    # =========================================================================

    def configure(self, session_id: str, request: ConfigureRequest) -> ActionResponse | ErrorResponse:
        return self._run(session_id, lambda s: s.engine.configure(request.door_count))

    def start_round(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self._run(session_id, lambda s: s.engine.start_round())

    def select_door(self, session_id: str, request: DoorRequest) -> ActionResponse | ErrorResponse:
        """Select a door; under the host policy the whole reveal runs now."""
        return self._run(session_id, lambda s: s.engine.select_door(request.door))

    def select_door_staged(
        self,
        session_id: str,
        request: DoorRequest,
        on_step: Callable[[ActionResult], Any] | None = None,
    ) -> ActionResponse | ErrorResponse:
        """
        Select a door and let the host reveal play out in the background.

        Must be called from inside a running event loop. Falls back to
        select_door() for manual variants or when reveal_delay is 0.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        if self.reveal_delay <= 0 or not session.engine.variant.host_reveals:
            return self.select_door(session_id, request)

        result = session.engine.select_door(request.door, staged=True)
        if not result.success:
            return self._error_from_result(result)

        reveal = StagedReveal(session.engine, delay=self.reveal_delay, on_step=on_step)
        session.start_staged_reveal(reveal)
        response = self._result_to_response(session_id, result)
        response.staged = True
        return response

    def open_door(self, session_id: str, request: DoorRequest) -> ActionResponse | ErrorResponse:
        return self._run(session_id, lambda s: s.engine.open_door(request.door))

    def decide(self, session_id: str, request: DecideRequest) -> ActionResponse | ErrorResponse:
        return self._run(session_id, lambda s: s.engine.decide(request.stick))

    def reset(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self._run(session_id, lambda s: s.reset())

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _run(
        self,
        session_id: str,
        operation: Callable[[Session], ActionResult],
    ) -> ActionResponse | ErrorResponse:
        """Look up the session, run one engine operation, convert the result."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        session.touch()
        result = operation(session)
        if not result.success:
            return self._error_from_result(result)
        return self._result_to_response(session_id, result)

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _error_from_result(self, result: ActionResult) -> ErrorResponse:
        return ErrorResponse(
            error=result.error,
            error_code=ErrorCode.__members__.get(result.error_code.name, ErrorCode.INTERNAL_ERROR),
            details={"round": self.round_state(result.snapshot).model_dump(mode="json")},
        )

    def _result_to_response(self, session_id: str, result: ActionResult) -> ActionResponse:
        return ActionResponse(
            session_id=session_id,
            success=True,
            messages=result.messages,
            revealed=result.revealed,
            round=self.round_state(result.snapshot),
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            variant=self._variant_info(session.engine.variant),
            player_name=session.player_name,
            created_at=session.created_at,
            round=self.round_state(session.engine.snapshot()),
            revealing=session.is_revealing,
        )

    @staticmethod
    def round_state(snapshot: RoundSnapshot) -> RoundState:
        """Convert an engine snapshot to its wire form."""
        return RoundState(**snapshot.to_dict())

    @staticmethod
    def _variant_info(rules: VariantRules) -> VariantInfo:
        return VariantInfo(
            name=rules.name,
            title=rules.title,
            reveal_policy=rules.reveal_policy.value,
            min_doors=rules.min_doors,
            max_doors=rules.max_doors,
            default_doors=rules.default_doors,
            description=rules.description,
        )
