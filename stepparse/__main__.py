#!/usr/bin/env python3

"""stepparse -- step a choice of literal sequences through an input.

Each alternative is a sequence of literals; the input is parsed over and
over from where the last match stopped, printing every step.
"""

import argparse
import sys
import time

from typing import Final, List, Optional

from stepparse.parser import Parser, Registry
from stepparse.task import StepLimitExceeded
from stepparse.visualizer import ParserTreePrinter, TaskTreePrinter

DEFAULT_ALTERNATIVES = ["1 2", "3 4", "5 6"]


def print_memstats() -> bool:
    MiB: Final = 2 ** 20
    try:
        import psutil  # type: ignore
    except ImportError:
        return False
    print("Memory stats:")
    process = psutil.Process()
    meminfo = process.memory_info()
    res = {}
    res["rss"] = meminfo.rss / MiB
    res["vms"] = meminfo.vms / MiB
    for key, value in res.items():
        print(f"  {key:12.12s}: {value:10.0f} MiB")
    return True


argparser = argparse.ArgumentParser(
    prog="stepparse", description="Step a grammar of literal sequences through an input"
)
argparser.add_argument("-q", "--quiet", action="store_true", help="Don't print each step")
argparser.add_argument(
    "-v",
    "--verbose",
    action="count",
    default=0,
    help="Print timing and cache stats; repeat to trace every step",
)
argparser.add_argument(
    "-a",
    "--alt",
    action="append",
    metavar="LITERALS",
    help="Add an alternative: space-separated literals matched in sequence "
    f"(default: {' | '.join(DEFAULT_ALTERNATIVES)})",
)
argparser.add_argument(
    "--ordered", action="store_true", help="Prefer earlier alternatives (ordered_choice)"
)
argparser.add_argument("--show-grammar", action="store_true", help="Print the parser tree")
argparser.add_argument(
    "--show-tasks", action="store_true", help="Print the task tree after each parse"
)
argparser.add_argument(
    "--max-steps", type=int, metavar="N", help="Give up on a parse after N pending steps"
)
argparser.add_argument("input", help="Text to parse ('-' to use stdin)")


def build_grammar(registry: Registry, alternatives: List[str], ordered: bool = False) -> Parser:
    alts = [registry.sequence([registry.str(word) for word in alt.split()]) for alt in alternatives]
    if ordered:
        return registry.ordered_choice(alts)
    return registry.choice(alts)


def run(
    parser: Parser,
    text: str,
    *,
    quiet: bool = False,
    show_tasks: bool = False,
    limit: Optional[int] = None,
) -> str:
    """Parse text repeatedly, printing each step; return what's left unparsed."""
    while text:
        print(f"input: {text!r}")
        task = parser(text)
        count = 0
        done = False
        while not done:
            count += 1
            done = task.step()
            if not quiet:
                if done:
                    print(f"step {count}: {task.result}")
                else:
                    print(f"step {count}: pending")
            if not done and limit is not None and count >= limit:
                raise StepLimitExceeded(task, limit)
        if show_tasks:
            TaskTreePrinter(text).print_task(parser)
        result = task.result
        if not result or result.remaining == text:
            break
        text = result.remaining
    return text


def main() -> None:
    args = argparser.parse_args()
    if args.max_steps is not None and args.max_steps < 1:
        argparser.error(f"--max-steps must be at least 1, got {args.max_steps}")
    verbose = args.verbose
    t0 = time.time()

    if args.input == "-":
        text = sys.stdin.read().rstrip("\n")
    else:
        text = args.input

    registry = Registry(verbose=verbose >= 2)
    parser = build_grammar(registry, args.alt or DEFAULT_ALTERNATIVES, args.ordered)

    if args.show_grammar:
        ParserTreePrinter().print_parser(parser)

    try:
        remaining = run(
            parser, text, quiet=args.quiet, show_tasks=args.show_tasks, limit=args.max_steps
        )
    except StepLimitExceeded as err:
        print(f"ERROR: {err}", file=sys.stderr)
        sys.exit(1)

    t1 = time.time()

    if remaining:
        print(f"stopped at: {remaining!r}")
    else:
        print("all input consumed")

    if verbose:
        dt = t1 - t0
        print(f"Total time: {dt:.3f} sec; {len(text)} chars")
        print("Caches sizes:")
        print(f"      parsers : {registry.parser_count:10}")
        print(f"        tasks : {registry.task_count:10}")
        steps = sum(task.steps for p in registry.parsers() for task in p.tasks())
        print(f"  total steps : {steps:10}")
        if not print_memstats():
            print("(Can't find psutil; install it for memory stats.)")

    sys.exit(1 if remaining else 0)


if __name__ == "__main__":
    main()
