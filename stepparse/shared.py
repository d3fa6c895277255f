"""A process-wide Registry and combinator shortcuts bound to it.

Grammars built with these functions all share one cache for the life of
the process.  Create a Registry of your own to keep a grammar's parsers
and tasks separate, or call registry.clear() to start over.
"""

from stepparse.parser import Registry

registry = Registry()

literal = registry.literal
pattern = registry.pattern
sequence = registry.sequence
choice = registry.choice
ordered_choice = registry.ordered_choice
combinator = registry.combinator

str = literal  # noqa: A001
