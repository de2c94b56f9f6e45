from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...engine.position import Position
from ...search.worker import WorkerConfig, WorkerHandle, start_worker


logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """One game: the host's view of the position and the worker playing against it.

    The host plays the side to move at creation; the worker answers every
    host move. Host and worker each hold their own ``Position`` tree.
    """

    position: Position
    worker: WorkerHandle
    history: List[str] = field(default_factory=list)
    # Serializes move/reply round trips for this game
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create sessions with unique `game_id`s, each with its own search worker
    - Retrieve existing sessions by `game_id`
    - Stop workers when sessions are deleted or the store is closed
    """

    def __init__(self, config: Optional[WorkerConfig] = None) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, GameSession] = {}
        self.config = config or WorkerConfig()

    def create(self, position: Optional[Position] = None, max_depth: Optional[int] = None) -> str:
        """Create a new game session and return its `game_id`."""
        if position is None:
            position = Position.initial()
        config = self.config
        if max_depth is not None:
            config = WorkerConfig(max_depth=max_depth, idle_sleep_s=self.config.idle_sleep_s)
        # The worker gets its own tree built from a copy of the board
        worker_root = Position(position.board.copy(), position.to_move, position.en_passant)
        handle = start_worker(worker_root, config)
        gid = str(uuid.uuid4())
        with self._lock:
            self._games[gid] = GameSession(position=position, worker=handle)
        logger.info("game created", extra={"game_id": gid, "max_depth": config.max_depth})
        return gid

    def get(self, game_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._games.get(game_id)

    def delete(self, game_id: str) -> bool:
        with self._lock:
            session = self._games.pop(game_id, None)
        if session is None:
            return False
        session.worker.stop()
        logger.info("game deleted", extra={"game_id": game_id})
        return True

    def close(self) -> None:
        with self._lock:
            ids = list(self._games)
        for gid in ids:
            self.delete(gid)

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
