"""Step handlers for the built-in combinators.

Each class here is the resumable state of one task.  The registry
creates one per (parser, input) pair and wraps it in a Task; calling it
does one unit of work and returns a Result, or None while pending.
"""

from __future__ import annotations

from typing import Any, List, Optional, Pattern, Sequence, TYPE_CHECKING

from stepparse.result import FAILURE, Result, Success

if TYPE_CHECKING:
    from stepparse.parser import Parser
    from stepparse.task import Task


class LiteralMatch:

    def __init__(self, literal: str, input: str):
        self.literal = literal
        self.input = input

    def __call__(self) -> Result:
        if self.input.startswith(self.literal):
            return Success(self.literal, self.input[len(self.literal):])
        return FAILURE


class PatternMatch:
    """Match a regular expression at the very start of the input.

    re.match() is anchored at position 0, so the match length is exactly
    the number of characters consumed.  The regex is compiled once, when
    the parser is built, and shared by all of its tasks.
    """

    def __init__(self, regex: Pattern[str], input: str):
        self.regex = regex
        self.input = input

    def __call__(self) -> Result:
        match = self.regex.match(self.input)
        if match is None:
            return FAILURE
        return Success(match.group(), self.input[match.end():])


class SequenceMatch:
    """Run the parsers one after another, each on what the last one left.

    Only one child task is live at a time.  A failing child fails the
    whole sequence and the parsers after it are never invoked.
    """

    def __init__(self, parsers: Sequence[Parser], input: str):
        self.parsers = parsers
        self.values: List[Any] = []
        self.remaining = input
        self.index = 0
        self.task: Optional[Task] = None
        if parsers:
            self.task = parsers[0](input)

    def __call__(self) -> Optional[Result]:
        if self.task is None:
            return Success([], self.remaining)
        if not self.task.step():
            return None
        match = self.task.result
        if not match:
            return FAILURE
        self.values.append(match.value)
        self.remaining = match.remaining
        self.index += 1
        if self.index == len(self.parsers):
            return Success(list(self.values), self.remaining)
        self.task = self.parsers[self.index](self.remaining)
        return None


class ChoiceMatch:
    """Advance every alternative in lockstep; first to succeed wins.

    All alternatives start on the same input when the task is created.
    Each step advances each unresolved alternative once.  If several
    succeed in the same round, the one declared first wins.  The winner's
    Success is returned as is, shared with the alternative's own task.
    """

    def __init__(self, parsers: Sequence[Parser], input: str):
        self.tasks: List[Task] = []
        for parser in parsers:
            self.tasks.append(parser(input))

    def __call__(self) -> Optional[Result]:
        # The same parser listed twice yields the same task; step it once.
        stepped = set()
        for task in self.tasks:
            if not task.done and id(task) not in stepped:
                stepped.add(id(task))
                task.step()
        return self.pick()

    def pick(self) -> Optional[Result]:
        for task in self.tasks:
            if task.result:
                return task.result
        if all(task.done for task in self.tasks):
            return FAILURE
        return None


class OrderedChoiceMatch(ChoiceMatch):
    """Like ChoiceMatch, but the first alternative in declaration order wins.

    A later alternative that succeeds early has to wait until every
    alternative before it has failed.
    """

    def pick(self) -> Optional[Result]:
        for task in self.tasks:
            if not task.done:
                return None
            if task.result:
                return task.result
        return FAILURE
