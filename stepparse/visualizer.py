from typing import Callable, Iterator, Optional

from stepparse.parser import Parser


class ParserTreePrinter:
    """Draw a parser, or the tasks it has spawned, as a tree."""

    def children(self, node: Parser) -> Iterator[Parser]:
        yield from node.children

    def name(self, node: Parser) -> str:
        if not node.children:
            return repr(node)
        return node.kind

    def print_parser(self, parser: Parser, printer: Callable[[str], object] = print) -> None:
        printer(self.print_nodes_recursively(parser).rstrip("\n"))

    def print_nodes_recursively(self, node: Parser, prefix: str = "", istail: bool = True) -> str:

        children = list(self.children(node))
        value = self.name(node)

        line = prefix + ("└──" if istail else "├──") + value + "\n"
        suffix = "   " if istail else "│  "

        if not children:
            return line

        *children, last = children
        for child in children:
            line += self.print_nodes_recursively(child, prefix + suffix, False)
        line += self.print_nodes_recursively(last, prefix + suffix, True)

        return line


class TaskTreePrinter(ParserTreePrinter):
    """Like ParserTreePrinter, annotated with the state of each task.

    Only tasks that already exist are shown; a sequence that hasn't
    reached a child yet has no task for it.
    """

    def __init__(self, input: str):
        self.input = input

    def describe(self, parser: Parser, input: str) -> str:
        task = parser.task_for(input)
        if task is None:
            state = "not started"
        elif task.done:
            state = f"{task.result!s:.60}"
        else:
            state = f"pending after {task.steps} steps"
        return f"{self.name(parser)} @ {input!r:.30}: {state}"

    def print_task(self, parser: Parser, printer: Callable[[str], object] = print) -> None:
        printer(self.print_tasks_recursively(parser, self.input).rstrip("\n"))

    def print_tasks_recursively(
        self, node: Parser, input: str, prefix: str = "", istail: bool = True
    ) -> str:
        line = prefix + ("└──" if istail else "├──") + self.describe(node, input) + "\n"
        suffix = "   " if istail else "│  "

        # Children of a sequence run on what the previous child left over.
        inputs = []
        children = list(self.children(node))
        if node.kind == "sequence":
            remaining: Optional[str] = input
            for child in children:
                if remaining is None:
                    break
                inputs.append((child, remaining))
                task = child.task_for(remaining)
                remaining = task.result.remaining if task is not None and task.result else None
        else:
            inputs = [(child, input) for child in children]

        if not inputs:
            return line

        *inputs, (last, last_input) = inputs
        for child, child_input in inputs:
            line += self.print_tasks_recursively(child, child_input, prefix + suffix, False)
        line += self.print_tasks_recursively(last, last_input, prefix + suffix, True)

        return line
