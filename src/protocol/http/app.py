from __future__ import annotations

import logging
import queue
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field

from .error import (
    exception_handler,
    http_exception_handler,
    illegal_move_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import GameSession, InMemorySessionStore
from ...engine.move import square_to_str, str_to_square
from ...engine.position import IllegalMoveError, Position
from ...search.messages import ErrorResult
from ...search.worker import WorkerConfig


logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    # Further capped by the server's configured max_depth
    max_depth: Optional[int] = Field(default=None, ge=0)


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_square: str = Field(..., alias="from", description="Origin square, e.g. e2")
    to_square: str = Field(..., alias="to", description="Destination square, e.g. e4")


class GameState(BaseModel):
    game_id: str
    fen: str
    board: str
    to_move: str
    en_passant: Optional[str]
    legal_moves: List[str]
    static_eval: int
    last_move: Optional[str]
    move_history: List[str]


class MoveResponse(GameState):
    reply: str


def create_app(max_depth: int = 2, reply_timeout_s: float = 30.0) -> FastAPI:
    store = InMemorySessionStore(WorkerConfig(max_depth=max_depth))

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        store.close()

    app = FastAPI(title="Tree Search Chess API", version="0.1.0", lifespan=lifespan)
    app.state.store = store

    # Basic logging setup
    logging.basicConfig(level=logging.INFO)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(IllegalMoveError, illegal_move_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        if req is not None and req.max_depth is not None and req.max_depth > max_depth:
            raise RequestValidationError(
                [
                    {
                        "loc": ("body", "max_depth"),
                        "msg": f"max_depth must be <= {max_depth}",
                        "type": "less_than_equal",
                    }
                ]
            )
        game_id = store.create(max_depth=req.max_depth if req else None)
        session = _require_game(store, game_id)
        return CreateGameResponse(game_id=game_id, fen=session.position.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        session = _require_game(store, game_id)
        return _game_state(game_id, session)

    # Sync handler: waiting on the worker blocks, so it runs in the threadpool
    @app.post("/api/games/{game_id}/move", response_model=MoveResponse)
    def make_move(game_id: str, req: MoveRequest) -> MoveResponse:
        session = _require_game(store, game_id)
        try:
            from_sq = str_to_square(req.from_square)
            to_sq = str_to_square(req.to_square)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        with session.lock:
            after = session.position.move_piece(from_sq, to_sq)
            session.worker.send_move(after.board)
            try:
                result = session.worker.receive(timeout=reply_timeout_s)
            except queue.Empty:
                logger.error("worker timed out", extra={"game_id": game_id})
                store.delete(game_id)
                raise HTTPException(status_code=504, detail="engine did not reply in time")
            played = square_to_str(from_sq) + square_to_str(to_sq)
            if isinstance(result, ErrorResult):
                if result.advanced:
                    # The worker kept the move; follow it so both trees share a root
                    session.history.append(played)
                    session.position = after
                raise HTTPException(status_code=409, detail=result.message)

            reply = after.find_child(result.board)
            if reply is None:
                raise RuntimeError("worker reply is not a legal move")
            reply_from, reply_to = after.move_of(reply)
            answered = square_to_str(reply_from) + square_to_str(reply_to)
            session.history.extend([played, answered])
            session.position = reply

        state = _game_state(game_id, session)
        return MoveResponse(**state.model_dump(), reply=answered)

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> GameSession:
    session = store.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="game not found")
    return session


def _game_state(game_id: str, session: GameSession) -> GameState:
    position: Position = session.position
    ep = position.en_passant
    return GameState(
        game_id=game_id,
        fen=position.to_fen(),
        board=position.board.render(),
        to_move=position.to_move.value,
        en_passant=square_to_str(ep) if ep is not None else None,
        legal_moves=[square_to_str(a) + square_to_str(b) for a, b in position.legal_moves()],
        static_eval=position.static_eval,
        last_move=session.history[-1] if session.history else None,
        move_history=list(session.history),
    )


# Default app for non-factory servers
app = create_app()
