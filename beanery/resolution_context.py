"""
ResolutionContext

This module provides the per-run state of bean construction.
The ResolutionContext tracks the names currently being constructed, in
the order they were entered, so that a name re-entered before it could be
exposed early is detected as an unresolvable cycle.

The context is stored in a ContextVar: every thread (and every top-level
``get_bean`` call) gets its own construction run.
"""

from contextvars import ContextVar
from typing import List, Optional


class ResolutionContext:
    """In-progress set for one construction run.

    Attributes:
        in_progress: Names being constructed, outermost first
        completed: Singletons finalized during this run, in completion order

    Note:
        This class is used internally by BeanFactory.
        Users should not need to interact with it directly.

    Example (internal usage)::

        ctx = ResolutionContext()
        ctx.enter("a")
        ctx.enter("b")
        ctx.is_in_progress("a")   # True
        ctx.describe_cycle("a")   # 'a -> b -> a'
        ctx.leave("b")
    """

    def __init__(self):
        self.in_progress: List[str] = []
        self.completed: List[str] = []

    def is_in_progress(self, name: str) -> bool:
        return name in self.in_progress

    def enter(self, name: str) -> None:
        self.in_progress.append(name)

    def leave(self, name: str) -> None:
        """Remove the innermost occurrence of ``name``."""
        for index in range(len(self.in_progress) - 1, -1, -1):
            if self.in_progress[index] == name:
                del self.in_progress[index]
                return

    def cycle(self, name: str) -> List[str]:
        """Return the chain from the first occurrence of ``name`` back to it."""
        if name not in self.in_progress:
            return [name]
        start = self.in_progress.index(name)
        return self.in_progress[start:] + [name]

    def describe_cycle(self, name: str) -> str:
        return " -> ".join(self.cycle(name))

    def mark(self) -> int:
        """Position in ``completed``, for a later ``completed_since``."""
        return len(self.completed)

    def record_completed(self, name: str) -> None:
        self.completed.append(name)

    def completed_since(self, mark: int) -> List[str]:
        """Remove and return the singletons completed after ``mark``."""
        names = self.completed[mark:]
        del self.completed[mark:]
        return names


# Resolution context of the construction run active on this thread
_resolution_context: ContextVar[Optional[ResolutionContext]] = ContextVar(
    '_BEANERY_RESOLUTION_CONTEXT',
    default=None
)
