"""
FastAPI Application - REST and WebSocket access to the table.

Endpoints:
    POST   /api/v1/join                                 Take a seat
    POST   /api/v1/change-name                          Rename your seat
    GET    /api/v1/seats                                List the seats
    GET    /api/v1/standings                            Last match's leader board
    GET    /api/v1/players/{id}/state                   Your seat and the board
    GET    /api/v1/players/{id}/prompts                 Questions waiting for you
    POST   /api/v1/players/{id}/card-choice             Answer a card prompt
    POST   /api/v1/players/{id}/row-choice              Answer a row prompt
    POST   /api/v1/players/{id}/play-again              Answer the rematch prompt
    WS     /api/v1/ws                                   Play over a socket

HTTP participants poll /prompts; WebSocket participants are pushed
"<kind>-prompted" messages. Either way an answer has to arrive before the
prompt timeout or the seat falls back to autoplay.

All responses are JSON with explicit Pydantic schemas.

Run directly with: uvicorn --factory takesix.api.app:create_app
"""

from contextlib import asynccontextmanager
from typing import Optional, Union
import json
import logging
import os

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..backends import PromptKind, WebSocketBackend
from ..engine_core.errors import NoPendingPrompt, SeatsFull, TakeSixError, UnknownParticipant
from .schemas import (
    AnswerResponse,
    CardChoiceRequest,
    ChangeNameRequest,
    ErrorCode,
    ErrorResponse,
    HealthResponse,
    JoinRequest,
    PlayAgainRequest,
    PlayerStateResponse,
    PromptsResponse,
    RowChoiceRequest,
    SeatListResponse,
    StandingsResponse,
)
from .service import GameService

# Environment configuration
TAKESIX_ENV = os.getenv("TAKESIX_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

log = logging.getLogger(__name__)

ERROR_STATUS: dict[type[TakeSixError], tuple[ErrorCode, int]] = {
    UnknownParticipant: (ErrorCode.PARTICIPANT_NOT_FOUND, 404),
    SeatsFull: (ErrorCode.SEATS_FULL, 409),
    NoPendingPrompt: (ErrorCode.NO_PENDING_PROMPT, 409),
}


def create_app(service: Optional[GameService] = None, run_match: bool = True) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService instance (creates new if not provided)
        run_match: Start the match loop with the application

    Returns:
        FastAPI application instance
    """
    game_service = service or GameService()
    ws_backend = game_service.backend(WebSocketBackend)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Starting takesix (%s)", TAKESIX_ENV)
        await game_service.start(run_match=run_match)
        try:
            yield
        finally:
            await game_service.stop()

    app = FastAPI(
        title="Take Six API",
        description="""
Four-seat penalty card game. Seats nobody controls play automatically.

## Prompts

A seated participant is asked three kinds of questions:
`card-choice`, `row-choice` (when a card fits no row) and `play-again`.
Answers that arrive late or out of range are replaced by an automatic
choice; a participant who times out loses the seat until they join again.

## Error Codes

| Code | Description |
|------|-------------|
| `PARTICIPANT_NOT_FOUND` | No seat is bound to the participant |
| `SEATS_FULL` | Every seat is taken |
| `NO_PENDING_PROMPT` | The participant was not asked this question |
| `VALIDATION_ERROR` | The request body or path failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = game_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    def game_error_response(error: TakeSixError) -> JSONResponse:
        error_code, status_code = ERROR_STATUS.get(
            type(error), (ErrorCode.INTERNAL_ERROR, 500)
        )
        details = None
        if getattr(error, "participant_id", None) is not None:
            details = {"participant_id": error.participant_id}
        return make_error_response(error_code, str(error), status_code, details)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request data",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    # =========================================================================
    # Participant Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/join",
        response_model=PlayerStateResponse,
        responses={409: {"model": ErrorResponse, "description": "All seats taken"}},
        tags=["Participants"],
        summary="Take a seat",
    )
    async def join(request: JoinRequest) -> Union[PlayerStateResponse, JSONResponse]:
        """
        Bind the participant to a seat.

        Joining again with the same `player_id` returns the same seat, with
        its score and hand intact.
        """
        try:
            return game_service.join(request)
        except (SeatsFull, UnknownParticipant) as e:
            return game_error_response(e)

    @app.post(
        "/api/v1/change-name",
        response_model=PlayerStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Participants"],
        summary="Rename your seat",
    )
    async def change_name(request: ChangeNameRequest) -> Union[PlayerStateResponse, JSONResponse]:
        try:
            return game_service.change_name(request)
        except UnknownParticipant as e:
            return game_error_response(e)

    @app.get(
        "/api/v1/players/{participant_id}/state",
        response_model=PlayerStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Participants"],
        summary="Get your seat and the board",
    )
    async def get_player_state(participant_id: str) -> Union[PlayerStateResponse, JSONResponse]:
        try:
            return game_service.get_player_state(participant_id)
        except UnknownParticipant as e:
            return game_error_response(e)

    @app.get(
        "/api/v1/players/{participant_id}/prompts",
        response_model=PromptsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Participants"],
        summary="Get the questions waiting for your answer",
    )
    async def get_prompts(participant_id: str) -> Union[PromptsResponse, JSONResponse]:
        try:
            return game_service.get_prompts(participant_id)
        except UnknownParticipant as e:
            return game_error_response(e)

    # =========================================================================
    # Answer Endpoints
    # =========================================================================

    def submit_answer(participant_id: str, kind: PromptKind, value) -> Union[AnswerResponse, JSONResponse]:
        try:
            return game_service.answer(participant_id, kind, value)
        except (UnknownParticipant, NoPendingPrompt) as e:
            return game_error_response(e)

    answer_responses = {
        404: {"model": ErrorResponse, "description": "Unknown participant"},
        409: {"model": ErrorResponse, "description": "No such question outstanding"},
    }

    @app.post(
        "/api/v1/players/{participant_id}/card-choice",
        response_model=AnswerResponse,
        responses=answer_responses,
        tags=["Prompts"],
        summary="Answer a card-choice prompt",
    )
    async def choose_card(participant_id: str, request: CardChoiceRequest):
        """
        Play the card at `card_index` of your hand.

        An index outside the hand is accepted here but replaced by an
        automatic choice.
        """
        return submit_answer(participant_id, PromptKind.CARD_CHOICE, request.card_index)

    @app.post(
        "/api/v1/players/{participant_id}/row-choice",
        response_model=AnswerResponse,
        responses=answer_responses,
        tags=["Prompts"],
        summary="Answer a row-choice prompt",
    )
    async def choose_row(participant_id: str, request: RowChoiceRequest):
        return submit_answer(participant_id, PromptKind.ROW_CHOICE, request.row_index)

    @app.post(
        "/api/v1/players/{participant_id}/play-again",
        response_model=AnswerResponse,
        responses=answer_responses,
        tags=["Prompts"],
        summary="Answer the rematch prompt",
    )
    async def play_again(participant_id: str, request: PlayAgainRequest):
        return submit_answer(participant_id, PromptKind.PLAY_AGAIN, request.play_again)

    # =========================================================================
    # Table Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/seats",
        response_model=SeatListResponse,
        tags=["Table"],
        summary="List the seats",
    )
    async def list_seats() -> SeatListResponse:
        return game_service.list_seats()

    @app.get(
        "/api/v1/standings",
        response_model=StandingsResponse,
        tags=["Table"],
        summary="Leader board of the last finished match",
    )
    async def get_standings() -> StandingsResponse:
        return game_service.get_standings()

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """
        WebSocket participants.

        See backends.websocket for the message protocol.
        """
        await websocket.accept()
        connection = ws_backend.open_connection(websocket)

        try:
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await connection.send_error("Invalid JSON")
                    continue
                await ws_backend.handle_message(connection, message)
        except WebSocketDisconnect:
            log.debug("Socket of %s disconnected", connection.participant_id or "anonymous")
        finally:
            await ws_backend.disconnect(connection)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="takesix",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Take Six API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
            "running": game_service.is_running,
        }

    return app
