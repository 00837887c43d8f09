'''
Mastermind API

Endpoints:
POST /games                -> start a game (classic or timed)
GET  /games                -> list games, newest first
GET  /games/{id}           -> read state & history
POST /games/{id}/guess     -> submit a guess
POST /games/{id}/expire    -> end a timed game whose clock ran out

Extras:
GET  /health               -> liveness check

Storage is the SQLAlchemy repository (DBGameStore).
'''

import logging
from typing import List, Optional

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import config
from .random_client import fetch_code
from .db import get_db                  # SQLAlchemy Session dependency
from .repository import DBGameStore     # DB-backed store
from .bootstrap_db import create_all    # dev-only: create tables
from .errors import (
    GameError,
    InvalidGuessShape,
    NoAttemptsRemaining,
    SecretUnavailable,
    SessionAlreadyOver,
    SessionNotFound,
    TimeExpired,
)
from .service import GameService
from .session import utcnow

from .schemas import (
    NewGameRequest,
    GuessRequest,
    GuessResponse,
    GameState,
    GameSummary,
    GuessEntryOut,
    ErrorOut,
)

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

config.validate()

app = FastAPI(title="Mastermind API", version="3.0.0")

# Allow everything in dev so the docs and front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# --- Dev convenience: auto-create tables locally ---
if config.APP_ENV == "local":
    @app.on_event("startup")
    def _dev_create_tables():
        create_all()

# Per-request service bound to the current DB session
def get_service(session = Depends(get_db)) -> GameService:
    return GameService(DBGameStore(session), supplier=fetch_code, clock=utcnow)

# ---------------- Errors ----------------

STATUS_BY_ERROR = {
    SessionNotFound: 404,
    InvalidGuessShape: 400,
    SessionAlreadyOver: 409,
    NoAttemptsRemaining: 409,
    TimeExpired: 409,
    SecretUnavailable: 503,
}

@app.exception_handler(GameError)
def handle_game_error(request: Request, exc: GameError) -> JSONResponse:
    status_code = STATUS_BY_ERROR.get(type(exc), 400)
    game = None
    if isinstance(exc, TimeExpired):
        # The game just ended, so its secret is now fair to show
        game = GameSummary.from_view(exc.session.view(exc.at))
    logger.info("%s %s -> %d %s", request.method, request.url.path, status_code, exc.code)
    body = ErrorOut(error=exc.code, detail=exc.detail, game=game)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

# ---------------- Routes ----------------

@app.get("/health", summary="Liveness check")
def health() -> dict:
    return {"status": "ok"}

@app.post("/games", response_model=GameSummary, status_code=201, summary="Start a new game")
def start_game(
    payload: Optional[NewGameRequest] = None,
    service: GameService = Depends(get_service),
) -> GameSummary:
    """
    Modes:
      classic -> 10 attempts
      timed   -> unlimited attempts, time_limit seconds (default 60)
    """
    payload = payload or NewGameRequest()
    view = service.create_session(payload.mode, payload.time_limit)
    return GameSummary.from_view(view)

@app.get("/games", response_model=List[GameSummary], summary="List games")
def list_games(service: GameService = Depends(get_service)) -> List[GameSummary]:
    return [GameSummary.from_view(v) for v in service.list_sessions()]

@app.get("/games/{game_id}", response_model=GameState, summary="Get current game state")
def get_game(
    game_id: str,
    service: GameService = Depends(get_service),
) -> GameState:
    state = service.get_state(game_id)
    return GameState.build(state.session, state.history)

@app.post("/games/{game_id}/guess", response_model=GuessResponse, summary="Submit a guess")
def submit_guess(
    game_id: str,
    payload: GuessRequest,
    service: GameService = Depends(get_service),
) -> GuessResponse:
    view, record = service.submit_guess(game_id, payload.guess)
    note = None
    if view.is_over:
        note = f"Game {view.status}. No more guesses allowed."
    return GuessResponse(
        game=GameSummary.from_view(view),
        feedback=GuessEntryOut.from_record(record),
        note=note,
    )

@app.post("/games/{game_id}/expire", response_model=GameSummary, summary="Expire a timed-out game")
def expire_game(
    game_id: str,
    service: GameService = Depends(get_service),
) -> GameSummary:
    return GameSummary.from_view(service.expire_session(game_id))
