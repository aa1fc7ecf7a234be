"""
Advisors

Advice kind + advice body + pointcut, and the ordering rule that turns a
set of advisors into an interceptor chain.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

from .pointcut import Pointcut


class AdviceKind(Enum):
    """Kind of advice. Values are the position in the chain, outermost first.

    AROUND sits innermost, right next to the target, so an around advice
    that does not proceed skips only the target method.
    """
    BEFORE = 0
    AFTER = 1
    AFTER_RETURNING = 2
    AROUND = 3


@dataclass
class Advisor:
    """One piece of advice bound to a pointcut.

    Attributes:
        aspect_name: Bean name of the declaring aspect
        kind: When the advice runs relative to the method
        advice: A callable, or the name of a method on the aspect bean
        pointcut: Which types and methods the advice applies to
    """
    aspect_name: Optional[str]
    kind: AdviceKind
    advice: Union[Callable, str]
    pointcut: Pointcut

    def matches_type(self, target_type: type) -> bool:
        return self.pointcut.matches_type(target_type)

    def matches_method(self, target_type: type, method_name: str) -> bool:
        return self.pointcut.matches_method(target_type, method_name)


def sort_advisors(advisors: Sequence[Advisor]) -> List[Advisor]:
    """Order by kind. ``sorted`` is stable, so ties keep registration order."""
    return sorted(advisors, key=lambda advisor: advisor.kind.value)


def match_advisors(advisors: Sequence[Advisor], target_type: type) -> List[Advisor]:
    """Advisors whose type predicate matches ``target_type``, in chain order."""
    return sort_advisors([a for a in advisors if a.matches_type(target_type)])
