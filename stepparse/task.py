from __future__ import annotations

from typing import Callable, Optional, TYPE_CHECKING

from stepparse.result import Result

if TYPE_CHECKING:
    from stepparse.parser import Parser

# A handler does one unit of work per call.  It returns a Result to
# resolve its task, or None to stay pending.
Handler = Callable[[], Optional[Result]]


class StepLimitExceeded(Exception):

    def __init__(self, task: Task, limit: int):
        super().__init__(f"{task!r} still pending after {limit} steps")
        self.task = task
        self.limit = limit


class ReentrantStepError(RuntimeError):
    pass


class Task:
    """One attempt to match one parser against one input.

    The task does nothing until step() is called.  Each call runs the
    handler once, and the handler may step child tasks in turn, so a
    single call can advance a whole chain of nested tasks.  Once the
    handler returns a Result the task is resolved and stays that way;
    further step() calls return True without doing anything.

    Tasks handed out by a Parser are shared by everyone asking for the
    same input, so stepping one advances it for all of them.
    """

    def __init__(self, handler: Handler, *, input: str = "", parser: Optional[Parser] = None):
        self._handler = handler
        self._result: Optional[Result] = None
        self._running = False
        self.input = input
        self.parser = parser
        self.steps = 0

    def __repr__(self):
        if self._result is None:
            state = "pending"
        else:
            state = repr(self._result)
        return f"<Task {self._name()} {state:.100}>"

    def _name(self) -> str:
        if self.parser is None:
            owner = getattr(self._handler, "__name__", type(self._handler).__name__)
        else:
            owner = str(self.parser)
        return f"{owner:.100}({self.input!r:.50})"

    @property
    def done(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[Result]:
        return self._result

    def step(self) -> bool:
        """Do one unit of work; return whether the task is resolved."""
        if self._result is not None:
            return True
        if self._running:
            raise ReentrantStepError(f"{self!r} was stepped from inside its own step")
        registry = None if self.parser is None else self.parser.registry
        if registry is not None and registry._verbose:
            return self._traced_step(registry)
        # Nested tasks are stepped from inside the handler, so keep this
        # path to a single frame per level.
        self._running = True
        try:
            result = self._handler()
        finally:
            self._running = False
        self.steps += 1
        if result is not None:
            self._result = result
        return result is not None

    def _traced_step(self, registry) -> bool:
        name = self._name()
        fill = "  " * registry._level
        registry._printer(f"{fill}{name} ... (step {self.steps + 1})")
        registry._level += 1
        self._running = True
        try:
            result = self._handler()
        finally:
            self._running = False
            registry._level -= 1
        self.steps += 1
        if result is None:
            registry._printer(f"{fill}... {name} -> pending")
            return False
        registry._printer(f"{fill}... {name} -> {result!s:.200}")
        self._result = result
        return True

    def run(self, limit: Optional[int] = None) -> Result:
        """Step until resolved and return the result.

        With a limit, give up with StepLimitExceeded after that many
        steps that left the task pending.
        """
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        pending = 0
        while not self.step():
            pending += 1
            if limit is not None and pending >= limit:
                raise StepLimitExceeded(self, limit)
        assert self._result is not None
        return self._result
