from typing import Any, NamedTuple, Union


class Success(NamedTuple):
    """A successful match: the matched value and the unconsumed input.

    Results are shared by every caller of the same task, so they are
    read-only.  The value itself is not copied: a sequence's list of
    values belongs to the task that produced it and must not be mutated.
    """

    value: Any
    remaining: str

    def __repr__(self):
        return f"Success({self.value!r}, {self.remaining!r})"


class Failure:
    """A failed match.  Carries nothing; all instances are equal."""

    __slots__ = ()

    def __bool__(self):
        return False

    def __eq__(self, other):
        if not isinstance(other, Failure):
            return NotImplemented
        return True

    def __hash__(self):
        return hash(Failure)

    def __repr__(self):
        return "Failure()"


FAILURE = Failure()

Result = Union[Success, Failure]
