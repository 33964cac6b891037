"""
Tests for API layer.

Tests:
- API service methods
- Error mapping for engine rejections
- Paced host reveals through the service
"""

import asyncio

import pytest

from ..api.schemas import (
    CreateSessionRequest,
    ConfigureRequest,
    DoorRequest,
    DecideRequest,
    ErrorCode,
    ErrorResponse,
    RoundPhase,
    SessionStatus,
)
from ..api.service import APIService
from ..session import SessionManager
from .conftest import FixedPrize


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """A service whose sessions always hide the car behind door 2."""
        return APIService(session_manager=SessionManager(rng_factory=lambda: FixedPrize(2)))

    @pytest.fixture
    def session_id(self, service):
        response = service.create_session(CreateSessionRequest(variant="host_auto", door_count=5))
        return response.session_id

    def test_list_variants(self, service):
        response = service.list_variants()

        names = [v.name for v in response.variants]
        assert names == ["host_auto", "user_manual", "user_manual_many"]
        assert response.default == "host_auto"

    def test_create_session(self, service):
        response = service.create_session(
            CreateSessionRequest(variant="user_manual_many", player_name="Ada")
        )

        assert response.status == SessionStatus.ACTIVE
        assert response.variant.min_doors == 7
        assert response.round.door_count == 7
        assert response.round.phase == RoundPhase.SETUP
        assert response.player_name == "Ada"

    def test_create_session_bad_variant(self, service):
        with pytest.raises(ValueError):
            service.create_session(CreateSessionRequest(variant="nope"))

    def test_full_host_round(self, service, session_id):
        service.start_round(session_id)
        response = service.select_door(session_id, DoorRequest(door=0))

        assert response.revealed == [1, 3, 4]
        assert response.round.phase == RoundPhase.DECISION
        assert response.round.prize_door is None

        response = service.decide(session_id, DecideRequest(stick=False))
        assert response.round.won is True
        assert response.round.prize_door == 2

    def test_rejection_carries_unchanged_round(self, service, session_id):
        response = service.decide(session_id, DecideRequest(stick=True))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_PHASE
        assert response.details["round"]["phase"] == "setup"

    def test_configure_out_of_range(self, service, session_id):
        response = service.configure(session_id, ConfigureRequest(door_count=12))

        assert response.error_code == ErrorCode.INVALID_CONFIGURATION

    def test_open_door_on_host_variant(self, service, session_id):
        service.start_round(session_id)
        response = service.open_door(session_id, DoorRequest(door=1))

        assert response.error_code == ErrorCode.UNSUPPORTED_OPERATION

    def test_unknown_session(self, service):
        response = service.start_round("nonexistent-id")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND
        assert service.get_session("nonexistent-id").error_code == ErrorCode.SESSION_NOT_FOUND

    def test_manual_instant_loss(self, service):
        session_id = service.create_session(
            CreateSessionRequest(variant="user_manual", door_count=4)
        ).session_id
        service.start_round(session_id)
        service.select_door(session_id, DoorRequest(door=0))

        response = service.open_door(session_id, DoorRequest(door=2))
        assert response.round.phase == RoundPhase.RESULT
        assert response.round.won is False
        assert response.messages == ["Oh no! Door 3 hides the car. You lose!"]

    def test_reset_and_end(self, service, session_id):
        service.start_round(session_id)
        response = service.reset(session_id)
        assert response.round.phase == RoundPhase.SETUP

        ended = service.end_session(session_id)
        assert ended.success
        assert ended.status == SessionStatus.ABANDONED
        assert not service.end_session(session_id).success
        assert session_id not in service.list_sessions()


class TestStagedSelect:
    """Tests for select_door_staged."""

    def test_staged_select_plays_out_in_background(self):
        service = APIService(
            session_manager=SessionManager(rng_factory=lambda: FixedPrize(2)),
            reveal_delay=0.001,
        )
        session_id = service.create_session(
            CreateSessionRequest(variant="host_auto", door_count=5)
        ).session_id
        service.start_round(session_id)
        steps = []

        async def scenario():
            response = service.select_door_staged(
                session_id, DoorRequest(door=0), on_step=steps.append
            )
            assert response.staged
            assert response.round.phase == RoundPhase.REVEALING
            session = service.session_manager.get_session(session_id)
            await session.reveal_task

        asyncio.run(scenario())

        assert [s.revealed for s in steps] == [[1], [3], [4]]
        assert service.get_session(session_id).round.phase == RoundPhase.DECISION

    def test_zero_delay_falls_back_to_synchronous(self):
        service = APIService(session_manager=SessionManager(rng_factory=lambda: FixedPrize(2)))
        session_id = service.create_session(
            CreateSessionRequest(variant="host_auto", door_count=3)
        ).session_id
        service.start_round(session_id)

        response = service.select_door_staged(session_id, DoorRequest(door=0))
        assert not response.staged
        assert response.round.phase == RoundPhase.DECISION


class TestSchemas:
    """Tests for Pydantic schema validation."""

    def test_create_session_leaves_door_bounds_to_engine(self):
        """Out-of-range counts pass the schema and are refused by the variant."""
        request = CreateSessionRequest(door_count=11)
        assert request.door_count == 11

        with pytest.raises(ValueError, match="between 3 and 10"):
            APIService().create_session(request)

    def test_round_state_dump(self):
        service = APIService()
        session = service.create_session(CreateSessionRequest())

        data = session.round.model_dump(mode="json")
        assert data["phase"] == "setup"
        assert data["prize_door"] is None
        assert data["status_message"] == "Welcome to the N-Door Monty Hall Challenge!"
