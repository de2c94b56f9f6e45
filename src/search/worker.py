from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.engine.board import Board
from src.engine.position import IllegalMoveError, Position

from .messages import Command, ErrorResult, MoveCommand, MoveResult, Result, StopCommand
from .tree import NoLegalMoveError, SearchTree


logger = logging.getLogger(__name__)


@dataclass
class WorkerConfig:
    max_depth: int = 2
    # Sleep while the tree is grown to max_depth and no message is pending
    idle_sleep_s: float = 0.005


class WorkerState(Enum):
    EXPANDING = "expanding"
    APPLYING = "applying"
    STOPPED = "stopped"


class SearchWorker:
    """Background search loop driven by two message channels.

    Notes:
    - Each poll does a non-blocking receive; with no message pending it
      expands one tree node, so a command waits at most one step.
    - Input errors are answered with ``ErrorResult``; the tree is unchanged.
      When the opponent's move leaves no reply, the move stays applied and the
      ``ErrorResult`` carries ``advanced=True``.
    - ``StopCommand`` is observed at the top of the next poll; nothing is sent
      after it.
    """

    def __init__(
        self,
        root: Position,
        inbox: "queue.Queue[Command]",
        outbox: "queue.Queue[Result]",
        config: Optional[WorkerConfig] = None,
    ) -> None:
        self.config = config or WorkerConfig()
        self.tree = SearchTree(root, max_depth=self.config.max_depth)
        self.inbox = inbox
        self.outbox = outbox
        self.state = WorkerState.EXPANDING
        self.polls = 0

    def run(self) -> None:
        logger.info("search worker started", extra={"max_depth": self.config.max_depth})
        while self.poll_once():
            pass
        logger.info("search worker stopped", extra={"polls": self.polls})

    def poll_once(self) -> bool:
        """Run one loop iteration; return ``False`` once stopped."""
        if self.state is WorkerState.STOPPED:
            return False
        self.polls += 1
        try:
            cmd = self.inbox.get_nowait()
        except queue.Empty:
            if not self.tree.step():
                logger.debug("depth bound reached", extra={"max_depth": self.config.max_depth})
                time.sleep(self.config.idle_sleep_s)
            return True

        if isinstance(cmd, StopCommand):
            self.state = WorkerState.STOPPED
            return False
        if isinstance(cmd, MoveCommand):
            self.state = WorkerState.APPLYING
            try:
                self._apply_opponent_move(cmd.board)
            finally:
                self.state = WorkerState.EXPANDING
            return True
        logger.warning("unknown command ignored", extra={"command": type(cmd).__name__})
        return True

    def _apply_opponent_move(self, board: Board) -> None:
        try:
            self.tree.advance(board)
        except IllegalMoveError as e:
            logger.warning("illegal move received", extra={"error": str(e)})
            self.outbox.put(ErrorResult(str(e)))
            return
        try:
            reply = self.tree.best_reply()
        except NoLegalMoveError as e:
            logger.warning("no reply available", extra={"error": str(e)})
            self.outbox.put(ErrorResult(str(e), advanced=True))
            return
        logger.info(
            "reply chosen",
            extra={"score": reply.value, "tree_size": self.tree.size()},
        )
        self.outbox.put(MoveResult(reply.board.copy()))


class WorkerHandle:
    """Host-side end of a running worker: its thread and both channels."""

    def __init__(
        self,
        thread: threading.Thread,
        inbox: "queue.Queue[Command]",
        outbox: "queue.Queue[Result]",
    ) -> None:
        self.thread = thread
        self.inbox = inbox
        self.outbox = outbox

    def send_move(self, board: Board) -> None:
        self.inbox.put(MoveCommand(board.copy()))

    def receive(self, timeout: Optional[float] = None) -> Result:
        """Block for the next result.

        Raises:
            queue.Empty: If nothing arrives within ``timeout`` seconds.
        """
        return self.outbox.get(timeout=timeout)

    def stop(self, join_timeout: Optional[float] = 5.0) -> None:
        self.inbox.put(StopCommand())
        self.thread.join(join_timeout)

    @property
    def alive(self) -> bool:
        return self.thread.is_alive()


def start_worker(root: Position, config: Optional[WorkerConfig] = None) -> WorkerHandle:
    """Spawn a daemon thread running a ``SearchWorker`` on ``root``."""
    inbox: "queue.Queue[Command]" = queue.Queue()
    outbox: "queue.Queue[Result]" = queue.Queue()
    worker = SearchWorker(root, inbox, outbox, config)
    thread = threading.Thread(target=worker.run, name="search-worker", daemon=True)
    thread.start()
    return WorkerHandle(thread, inbox, outbox)
