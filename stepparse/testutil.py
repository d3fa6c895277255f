from typing import Any, List, Optional, Tuple

from stepparse.parser import Parser
from stepparse.task import StepLimitExceeded, Task


def drive(task: Task, limit: int = 1000) -> int:
    """Step task until it resolves; return how many step() calls it took."""
    for count in range(1, limit + 1):
        if task.step():
            return count
    raise StepLimitExceeded(task, limit)


def step_trace(task: Task, limit: int = 1000) -> List[bool]:
    # One entry per step() call, in order.
    trace = []
    while True:
        done = task.step()
        trace.append(done)
        if done:
            return trace
        if len(trace) >= limit:
            raise StepLimitExceeded(task, limit)


def parse_all(parser: Parser, source: str, *, limit: Optional[int] = 1000) -> Tuple[List[Any], str]:
    """Parse repeatedly from the start of what's left.

    Stops when a parse fails or consumes nothing.  Returns the values of
    the successful parses and the input left over.
    """
    values = []
    while source:
        result = parser(source).run(limit)
        if not result or result.remaining == source:
            break
        values.append(result.value)
        source = result.remaining
    return values, source
