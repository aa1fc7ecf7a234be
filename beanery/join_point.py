"""
Join Points

What advice sees of the intercepted call
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Tuple

if TYPE_CHECKING:
    from .invocation import MethodInvocation


@dataclass
class JoinPoint:
    """A method call being intercepted.

    Attributes:
        target: The unproxied object whose method is called
        method_name: Name of the called method
        args: Positional arguments
        kwargs: Keyword arguments
    """
    target: Any
    method_name: str
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)

    @property
    def signature(self) -> str:
        return f"{type(self.target).__qualname__}.{self.method_name}"


class ProceedingJoinPoint(JoinPoint):
    """Join point handed to around advice.

    ``proceed()`` continues the interceptor chain and returns its result.
    Not calling it skips the rest of the chain, including the target method.
    """

    def __init__(self, invocation: 'MethodInvocation'):
        super().__init__(
            invocation.target,
            invocation.method_name,
            invocation.args,
            invocation.kwargs,
        )
        self._invocation = invocation

    def proceed(self) -> Any:
        return self._invocation.proceed()


def join_point_for(invocation: 'MethodInvocation') -> JoinPoint:
    return JoinPoint(invocation.target, invocation.method_name, invocation.args, invocation.kwargs)
