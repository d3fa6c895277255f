from stepparse.memo import Memo
from stepparse.memo import memoize
from stepparse.result import FAILURE, Failure, Result, Success
from stepparse.task import ReentrantStepError, StepLimitExceeded, Task
from stepparse.parser import GrammarError, Parser, Registry
from stepparse.shared import choice
from stepparse.shared import literal
from stepparse.shared import ordered_choice
from stepparse.shared import pattern
from stepparse.shared import sequence
from stepparse.shared import str

__all__ = [
    "Memo",
    "memoize",
    "FAILURE",
    "Failure",
    "Result",
    "Success",
    "ReentrantStepError",
    "StepLimitExceeded",
    "Task",
    "GrammarError",
    "Parser",
    "Registry",
    "choice",
    "literal",
    "ordered_choice",
    "pattern",
    "sequence",
    "str",
]
