from typing import Any, Callable, Dict, Hashable, Iterator, List, Tuple, TypeVar, cast

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


def freeze(value: Any) -> Hashable:
    """Return a hashable key that is equal for structurally equal values.

    Containers are converted recursively and tagged with their type, so
    [1, 2] and [1, 2] give the same key but [1, 2] and (1, 2) do not,
    which is what == says about them.  Anything else must be hashable
    already; if it isn't, hash() raises TypeError.
    """
    if isinstance(value, (list, tuple)):
        return type(value), tuple(freeze(item) for item in value)
    if isinstance(value, dict):
        return dict, frozenset((key, freeze(item)) for key, item in value.items())
    if isinstance(value, (set, frozenset)):
        return frozenset, frozenset(freeze(item) for item in value)
    hash(value)
    return value


class Memo:
    """Cache keyed by argument tuples compared by deep equality.

    Keys are frozen into hashable form so lookup is a dict probe.
    Argument tuples that can't be frozen go into a side list that is
    scanned linearly with ==; that's fine for the odd custom argument
    but gets slow if most keys end up there.

    Nothing is evicted unless clear() is called.
    """

    def __init__(self) -> None:
        self._table: Dict[Hashable, Tuple[Tuple[Any, ...], Any]] = {}
        self._unhashable: List[Tuple[Tuple[Any, ...], Any]] = []
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._table) + len(self._unhashable)

    def __iter__(self) -> Iterator[Any]:
        for args, value in self._table.values():
            yield value
        for args, value in self._unhashable:
            yield value

    def __contains__(self, args: Tuple[Any, ...]) -> bool:
        try:
            self.get(args)
        except KeyError:
            return False
        return True

    def get(self, args: Tuple[Any, ...]) -> Any:
        """Return the value stored for args; raise KeyError if there is none."""
        try:
            key = freeze(args)
        except TypeError:
            for stored, value in self._unhashable:
                if len(stored) == len(args) and stored == args:
                    return value
            raise KeyError(args)
        return self._table[key][1]

    def put(self, args: Tuple[Any, ...], value: Any) -> None:
        try:
            key = freeze(args)
        except TypeError:
            self._unhashable.append((args, value))
        else:
            self._table[key] = args, value

    def lookup(self, args: Tuple[Any, ...], compute: Callable[[], T]) -> Tuple[T, bool]:
        """Return (value, hit), calling compute() and storing its result on a miss."""
        try:
            value = self.get(args)
        except KeyError:
            self.misses += 1
            value = compute()
            self.put(args, value)
            return value, False
        self.hits += 1
        return value, True

    def clear(self) -> None:
        self._table.clear()
        self._unhashable.clear()
        self.hits = 0
        self.misses = 0


def memoize(func: F) -> F:
    """Memoize a function on its positional arguments.

    Calls with deeply equal arguments return the value computed by the
    first such call, even if it was computed for different (but equal)
    container objects.  The cache is available as the .memo attribute.
    """
    memo = Memo()

    def memoize_wrapper(*args: Any) -> Any:
        value, hit = memo.lookup(args, lambda: func(*args))
        return value

    memoize_wrapper.__name__ = func.__name__
    memoize_wrapper.__doc__ = func.__doc__
    memoize_wrapper.__wrapped__ = func  # type: ignore
    memoize_wrapper.memo = memo  # type: ignore
    return cast(F, memoize_wrapper)
