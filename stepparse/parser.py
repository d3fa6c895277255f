from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from stepparse.combinators import (
    ChoiceMatch,
    LiteralMatch,
    OrderedChoiceMatch,
    PatternMatch,
    SequenceMatch,
)
from stepparse.memo import Memo
from stepparse.result import Result
from stepparse.task import Handler, Task

# factory(*args, input) -> handler for a new task on input.
Factory = Callable[..., Handler]


class GrammarError(Exception):
    pass


# How many levels of nested parsers repr() spells out.
REPR_DEPTH = 10


def format_arg(arg: Any, depth: int = REPR_DEPTH) -> str:
    if isinstance(arg, Parser):
        return arg.describe(depth)
    if isinstance(arg, (list, tuple)):
        return "[" + ", ".join(format_arg(item, depth) for item in arg) + "]"
    return repr(arg)


class Parser:
    """A canonical parser: callable on an input string, returning a Task.

    Don't construct these directly; use the combinator methods of a
    Registry, which hand out the same Parser for equal arguments.  A
    Parser keeps one Task per distinct input it has been called with.
    """

    def __init__(self, registry: Registry, kind: str, args: Tuple[Any, ...], factory: Factory):
        self.registry = registry
        self.kind = kind
        self.args = args
        self._factory = factory
        self._tasks: Dict[str, Task] = {}

    def __repr__(self):
        return self.describe(REPR_DEPTH)

    def describe(self, depth: int) -> str:
        """Like repr(), but parsers more than depth levels down print as kind(...)."""
        if depth <= 0:
            return f"{self.kind}(...)"
        args = self.args
        if self.kind == "pattern":
            regex = args[0]
            args = (regex.pattern, regex.flags & ~re.UNICODE)
            if not args[1]:
                args = args[:1]
        return f"{self.kind}({', '.join(format_arg(arg, depth - 1) for arg in args)})"

    def __call__(self, input: str) -> Task:
        if not isinstance(input, str):
            raise TypeError(f"{self!s:.100} expects a str input, got {type(input).__name__}")
        registry = self.registry
        task = self._tasks.get(input)
        if task is None:
            task = Task(self._factory(*self.args, input), input=input, parser=self)
            self._tasks[input] = task
            if registry._verbose:
                registry.trace(f"set task: {task._name()}")
        elif registry._verbose:
            registry.trace(f"hit task: {task._name()}")
        return task

    @property
    def children(self) -> List[Parser]:
        """The parsers this one was built from, in argument order."""
        children = []
        for arg in self.args:
            if isinstance(arg, Parser):
                children.append(arg)
            elif isinstance(arg, (list, tuple)):
                children.extend(item for item in arg if isinstance(item, Parser))
        return children

    @property
    def task_count(self) -> int:
        return len(self._tasks)

    def task_for(self, input: str) -> Optional[Task]:
        """Return the task already started on input, or None.  Never creates one."""
        return self._tasks.get(input)

    def tasks(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def parse(self, input: str, *, limit: Optional[int] = None) -> Result:
        """Shorthand for self(input).run(limit)."""
        return self(input).run(limit)


class Registry:
    """Owns the parser cache for one grammar session.

    Building the same combinator with equal arguments twice returns the
    same Parser, and a Parser returns the same Task for the same input,
    so equal sub-grammars in different places share their work.

    With verbose=True every cache lookup and every task step is traced
    through printer, indented by nesting level.

    Not thread-safe.
    """

    _builtins: Dict[str, Factory] = {
        "str": LiteralMatch,
        "pattern": PatternMatch,
        "sequence": SequenceMatch,
        "choice": ChoiceMatch,
        "ordered_choice": OrderedChoiceMatch,
    }

    def __init__(self, *, verbose: bool = False, printer: Callable[[str], Any] = print):
        self._verbose = verbose
        self._printer = printer
        self._level = 0
        self._parsers = Memo()
        self._factories: Dict[str, Factory] = dict(self._builtins)

    def __repr__(self):
        return f"<Registry parsers={self.parser_count} tasks={self.task_count}>"

    def trace(self, message: str) -> None:
        self._printer(f"{'  ' * self._level}{message}")

    @property
    def parser_count(self) -> int:
        return len(self._parsers)

    @property
    def task_count(self) -> int:
        return sum(parser.task_count for parser in self._parsers)

    def parsers(self) -> Iterator[Parser]:
        return iter(self._parsers)

    def clear(self) -> None:
        """Forget all parsers and tasks.

        Parsers handed out earlier keep working, but parsers built after
        this call won't be shared with them.
        """
        for parser in self._parsers:
            parser._tasks.clear()
        self._parsers.clear()

    def intern(self, kind: str, args: Tuple[Any, ...], factory: Factory) -> Parser:
        """Return the canonical Parser for kind and args, creating it if needed."""
        assert self._factories.get(kind) is factory, kind
        parser, hit = self._parsers.lookup(
            (kind,) + args, lambda: Parser(self, kind, args, factory)
        )
        if self._verbose:
            self.trace(f"{'hit' if hit else 'set'} parser: {parser!s:.200}")
        return parser

    def check_parser(self, kind: str, parser: Any) -> Parser:
        if not isinstance(parser, Parser):
            raise GrammarError(f"{kind}() expects parsers, got {parser!r:.100}")
        if parser.registry is not self:
            raise GrammarError(f"{kind}() got {parser!s:.100} from a different registry")
        return parser

    def check_parsers(self, kind: str, parsers: Iterable[Any]) -> Tuple[Parser, ...]:
        if isinstance(parsers, Parser):
            raise GrammarError(f"{kind}() takes a list of parsers, not a single parser")
        try:
            items = tuple(parsers)
        except TypeError:
            raise GrammarError(
                f"{kind}() takes a list of parsers, got {type(parsers).__name__}"
            ) from None
        for parser in items:
            self.check_parser(kind, parser)
        return items

    def combinator(self, kind: str, factory: Factory) -> Callable[..., Parser]:
        """Define a new combinator and return its constructor.

        factory(*args, input) is called once per task and must return a
        handler: a callable doing one step of work per call, returning a
        Result when done or None while pending.  List arguments are
        stored as tuples; any Parser among the arguments must come from
        this registry.
        """
        existing = self._factories.get(kind)
        if existing is not None and existing is not factory:
            raise GrammarError(f"combinator {kind!r} is already defined")
        self._factories[kind] = factory

        def combinator_wrapper(*args: Any) -> Parser:
            args = tuple(self._normalize_arg(kind, arg) for arg in args)
            return self.intern(kind, args, factory)

        combinator_wrapper.__name__ = kind
        combinator_wrapper.__wrapped__ = factory  # type: ignore
        return combinator_wrapper

    def _normalize_arg(self, kind: str, arg: Any) -> Any:
        if isinstance(arg, Parser):
            return self.check_parser(kind, arg)
        if isinstance(arg, (list, tuple)):
            return tuple(self._normalize_arg(kind, item) for item in arg)
        return arg

    # Built-in combinators.

    def literal(self, literal: str) -> Parser:
        """Match literal at the start of the input."""
        if not isinstance(literal, str):
            raise GrammarError(f"str() expects a string, got {literal!r:.100}")
        return self.intern("str", (literal,), LiteralMatch)

    def pattern(self, expr: Any, flags: int = 0) -> Parser:
        """Match a regular expression at the start of the input."""
        if isinstance(expr, re.Pattern):
            if flags:
                raise GrammarError("cannot pass flags with an already compiled pattern")
            expr, flags = expr.pattern, expr.flags
        if not isinstance(expr, str):
            raise GrammarError(f"pattern() expects a str pattern, got {expr!r:.100}")
        try:
            regex = re.compile(expr, flags)
        except re.error as err:
            raise GrammarError(f"invalid pattern {expr!r}: {err}") from err
        # Compiled patterns compare equal by source and flags, and str
        # patterns always carry re.UNICODE, so pattern("a") and
        # pattern(re.compile("a")) intern to the same parser.
        return self.intern("pattern", (regex,), PatternMatch)

    def sequence(self, parsers: Iterable[Parser]) -> Parser:
        return self.intern("sequence", (self.check_parsers("sequence", parsers),), SequenceMatch)

    def choice(self, parsers: Iterable[Parser]) -> Parser:
        return self.intern("choice", (self.check_parsers("choice", parsers),), ChoiceMatch)

    def ordered_choice(self, parsers: Iterable[Parser]) -> Parser:
        return self.intern(
            "ordered_choice",
            (self.check_parsers("ordered_choice", parsers),),
            OrderedChoiceMatch,
        )

    str = literal
