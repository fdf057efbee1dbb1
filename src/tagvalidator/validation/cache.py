"""Per-type memoization of compiled validation routines.

Compiled routines are looked up without locking. The first compilation of a
key runs under a re-entrant lock, so concurrent first users of a type wait for
the single compilation instead of compiling their own copy.

A type that refers to itself (``Node`` with a ``children: list[Node]`` field)
asks for its own routine while that routine is still being built. The cache
answers with a ``ForwardRoutine`` placeholder that calls the real routine once
it exists. Newly compiled routines stay private to the compiling thread until
the outermost compilation finishes and every placeholder is resolved; only
then are they published for lock-free readers.
"""

import logging
import threading
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)

Routine = Callable[..., None]


class ForwardRoutine:
    """Placeholder for a routine whose compilation is in progress.

    Holders of the placeholder can ask, through ``on_resolve``, to be handed
    the real routine once it exists, so they call it directly afterwards.
    """

    __slots__ = ("key", "target", "_waiters")

    def __init__(self, key: Hashable):
        self.key = key
        self.target: Routine | None = None
        self._waiters: list[Callable[[Routine], None]] = []

    def on_resolve(self, assign: Callable[[Routine], None]) -> None:
        if self.target is not None:
            assign(self.target)
        else:
            self._waiters.append(assign)

    def resolve(self, routine: Routine) -> None:
        self.target = routine
        for assign in self._waiters:
            assign(routine)
        self._waiters.clear()

    def __call__(self, *args: Any) -> None:
        if self.target is None:
            raise RuntimeError(f"routine for {self.key!r} used before its compilation finished")
        self.target(*args)

    def __repr__(self) -> str:
        state = "resolved" if self.target is not None else "pending"
        return f"<ForwardRoutine {self.key!r} {state}>"


class ValidatorCache:
    """Maps a key (usually a type hint) to its compiled routine."""

    def __init__(self):
        self._routines: dict[Hashable, Routine] = {}
        self._lock = threading.RLock()
        # only touched while holding _lock
        self._pending: dict[Hashable, ForwardRoutine] = {}
        self._finished: dict[Hashable, Routine] = {}
        self._depth = 0
        self._failed = False
        self.compilations = 0

    def get(self, key: Hashable) -> Routine | None:
        return self._routines.get(key)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._routines

    def __len__(self) -> int:
        return len(self._routines)

    def get_or_compile(self, key: Hashable, build: Callable[[], Routine]) -> Routine:
        """Return the routine for ``key``, calling ``build`` at most once per key."""
        routine = self._routines.get(key)
        if routine is not None:
            return routine

        with self._lock:
            routine = self._routines.get(key) or self._finished.get(key)
            if routine is not None:
                return routine

            forward = self._pending.get(key)
            if forward is not None:
                logger.debug(f"Self-referential compilation of {key!r}, using forward reference")
                return forward

            forward = ForwardRoutine(key)
            self._pending[key] = forward
            self._depth += 1
            try:
                routine = build()
                forward.resolve(routine)
                self._finished[key] = routine
                self.compilations += 1
                logger.debug(f"Compiled routine for {key!r}")
            except BaseException:
                self._failed = True
                raise
            finally:
                del self._pending[key]
                self._depth -= 1
                if self._depth == 0:
                    self._publish()
            return routine

    def _publish(self) -> None:
        if self._failed:
            # a build failed part way: nothing compiled in this session is trusted
            logger.warning(f"Discarding {len(self._finished)} routines from an interrupted compilation")
            self._finished.clear()
            self._failed = False
            return
        self._routines.update(self._finished)
        self._finished.clear()
