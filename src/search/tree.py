from __future__ import annotations

import logging
from typing import List, Optional

from src.engine.board import Board
from src.engine.position import IllegalMoveError, Position


logger = logging.getLogger(__name__)

# Upper bound on already-expanded nodes skipped by one step; keeps a step
# short after the root moves into a large retained subtree.
MAX_SKIPS_PER_STEP = 256


class NoLegalMoveError(RuntimeError):
    """The side to move has no successor positions."""


class SearchTree:
    """Game tree grown one frontier node per ``step``.

    Responsibility: own the root, walk the tree level by level with a cursor
    of child indices, expand one node per step up to ``max_depth``, and
    resolve plies by promoting a child to be the new root.

    Notes:
    - ``cursor`` addresses a node at depth ``len(cursor)``; all nodes above
      that depth have already been visited.
    - Depth is bounded by ``max_depth``: once the cursor is longer, ``step``
      is a no-op.
    """

    def __init__(self, root: Position, max_depth: int = 2) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.root = root
        self.max_depth = max_depth
        self.cursor: List[int] = []

    def step(self) -> bool:
        """Expand the next frontier node.

        Returns:
            bool: ``False`` when the depth bound is reached and nothing was
                done, ``True`` otherwise.
        """
        skips = 0
        while len(self.cursor) <= self.max_depth:
            node = self._resolve()
            if node is None:
                continue  # level exhausted, cursor grew by one
            self._advance_cursor()
            if not node.expanded:
                node.expand()
                return True
            skips += 1
            if skips >= MAX_SKIPS_PER_STEP:
                return True
        return False

    def advance(self, board: Board) -> Position:
        """Make the root child whose board equals ``board`` the new root.

        Siblings are dropped and the cursor restarts at the new root.

        Raises:
            IllegalMoveError: If no child matches; the tree is left unchanged.
        """
        child = self.root.find_child(board)
        if child is None:
            raise IllegalMoveError("board does not match any legal move from the current position")
        self._set_root(child)
        return child

    def best_reply(self) -> Position:
        """Promote the root child that is best for the side to move.

        Every child is scored with ``tree_eval`` for the opponent of the side
        to move; the lowest score wins, the first such child on ties.

        Raises:
            NoLegalMoveError: If the root has no children.
        """
        children = self.root.expand()
        if not children:
            raise NoLegalMoveError("no legal moves available")
        opponent = self.root.to_move.opponent
        best_idx = 0
        best_val: Optional[int] = None
        for idx, child in enumerate(children):
            val = child.tree_eval(opponent)
            if best_val is None or val < best_val:
                best_idx, best_val = idx, val
        chosen = children[best_idx]
        logger.debug("best reply", extra={"index": best_idx, "score": best_val})
        self._set_root(chosen)
        return chosen

    def size(self) -> int:
        """Number of positions currently held in the tree."""
        count = 0
        stack = [self.root]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children)
        return count

    def depth(self) -> int:
        """Depth of the level currently being expanded."""
        return len(self.cursor)

    def _set_root(self, root: Position) -> None:
        self.root = root
        self.cursor = []

    def _resolve(self) -> Optional[Position]:
        """Walk the cursor from the root, carrying over exhausted levels.

        Returns the addressed node, or ``None`` after the current level ran
        out and the cursor was grown to the first path of the next level.
        """
        node = self.root
        level = 0
        while level < len(self.cursor):
            idx = self.cursor[level]
            if idx < len(node.children):
                node = node.children[idx]
                level += 1
                continue
            if level == 0:
                self.cursor = [0] * (len(self.cursor) + 1)
                return None
            for deeper in range(level, len(self.cursor)):
                self.cursor[deeper] = 0
            self.cursor[level - 1] += 1
            node = self.root
            level = 0
        return node

    def _advance_cursor(self) -> None:
        if not self.cursor:
            self.cursor = [0]
        else:
            self.cursor[-1] += 1
