"""
FastAPI Application - REST API hosting the Stars engine.

Endpoints:
    POST   /api/v1/games                Open a game
    GET    /api/v1/games                List open games
    GET    /api/v1/games/{id}           Get game state
    POST   /api/v1/games/{id}/actions   Apply an action
    GET    /api/v1/games/{id}/scores    Get the scoreboard
    DELETE /api/v1/games/{id}           Close a game

Every state response carries a `version`. Send it back as
`expected_version` with an action to have the request rejected (409)
if someone else changed the game in between.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Union
import logging
import os

# Environment configuration
STARS_ENV = os.getenv("STARS_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
DEFAULT_SESSION_MAX_AGE = 3600

logger = logging.getLogger(__name__)


def session_max_age() -> int:
    """Seconds a finished game is kept, from STARS_SESSION_MAX_AGE."""
    raw = os.getenv("STARS_SESSION_MAX_AGE")
    if raw is None:
        return DEFAULT_SESSION_MAX_AGE
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            "STARS_SESSION_MAX_AGE=%r is not a whole number of seconds; using %d",
            raw, DEFAULT_SESSION_MAX_AGE,
        )
        return DEFAULT_SESSION_MAX_AGE


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        CreateGameRequest,
        ActionRequest,
        GameStateResponse,
        ActionResponse,
        ScoreboardResponse,
        ErrorResponse,
        GameListResponse,
        EndGameResponse,
        HealthResponse,
        ErrorCode,
    )

    app = FastAPI(
        title="Stars API",
        description="""
Dice game engine: roll eight dice, bank faces, claim and steal star tiles.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Game does not exist |
| `STALE_STATE` | `expected_version` is behind the game |
| `ACTION_NOT_ALLOWED` | Action not legal in the current phase |
| `FACE_NOT_SELECTABLE` | Face not thrown or already chosen |
| `TILE_NOT_SELECTABLE` | Tile cannot be claimed with the chosen dice |
| `STEAL_NOT_ALLOWED` | Target's top tile does not match the chosen dice |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        debug=STARS_ENV == "development",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()
    max_age = session_max_age()

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.STALE_STATE: 409,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_codes.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def housekeeping():
        removed = api_service.session_manager.cleanup_stale_sessions(max_age)
        if removed:
            logger.info("Cleaned up %d finished games", len(removed))

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        tags=["Games"],
        summary="Open a new game",
    )
    async def create_game(request: CreateGameRequest) -> GameStateResponse:
        """
        Open a new game on the setup screen.

        Pass a `seed` for reproducible dice.
        """
        housekeeping()
        return api_service.create_game(request)

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List open games",
    )
    async def list_games() -> GameListResponse:
        games = api_service.list_games()
        return GameListResponse(games=games, count=len(games))

    @app.get(
        "/api/v1/games/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game state",
    )
    async def get_game(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/games/{session_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Action rejected"},
            404: {"model": ErrorResponse, "description": "Game not found"},
            409: {"model": ErrorResponse, "description": "Stale expected_version"},
        },
        tags=["Game Loop"],
        summary="Apply an action",
    )
    async def apply_action(
        session_id: str, request: ActionRequest
    ) -> Union[ActionResponse, JSONResponse]:
        """
        Apply one action (roll, pick, pick-tile, steal-tile, next, ...).

        A rejected action leaves the game unchanged.
        """
        response = api_service.apply_action(session_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/games/{session_id}/scores",
        response_model=ScoreboardResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get the scoreboard",
    )
    async def get_scores(session_id: str) -> Union[ScoreboardResponse, JSONResponse]:
        response = api_service.get_scores(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.delete(
        "/api/v1/games/{session_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="Close a game",
    )
    async def end_game(session_id: str) -> EndGameResponse:
        success = api_service.end_game(session_id)
        return EndGameResponse(success=success, session_id=session_id)

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
            service="stars-engine",
            version="1.0.0",
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Stars API",
            "version": "1.0.0",
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn stars.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
