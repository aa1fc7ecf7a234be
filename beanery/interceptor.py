"""
Method Interceptors

One interceptor per advice kind. Each receives the MethodInvocation and
decides when to call ``proceed()``.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

from .advisor import AdviceKind
from .exceptions import AopConfigError
from .invocation import MethodInvocation
from .join_point import ProceedingJoinPoint, join_point_for


class MethodInterceptor(ABC):
    """Link in an interceptor chain"""

    def __init__(self, advice: Callable):
        self.advice = advice

    @abstractmethod
    def invoke(self, invocation: MethodInvocation) -> Any:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({getattr(self.advice, '__qualname__', self.advice)!r})"


class BeforeInterceptor(MethodInterceptor):
    """Runs ``advice(join_point)`` then proceeds. An exception aborts the call."""

    def invoke(self, invocation: MethodInvocation) -> Any:
        self.advice(join_point_for(invocation))
        return invocation.proceed()


class AfterInterceptor(MethodInterceptor):
    """Proceeds, then runs ``advice(join_point)`` whether or not the call raised."""

    def invoke(self, invocation: MethodInvocation) -> Any:
        try:
            return invocation.proceed()
        finally:
            self.advice(join_point_for(invocation))


class AfterReturningInterceptor(MethodInterceptor):
    """Proceeds, then runs ``advice(join_point, result)`` on normal return.

    A non-None advice return value replaces the result.
    """

    def invoke(self, invocation: MethodInvocation) -> Any:
        result = invocation.proceed()
        replacement = self.advice(join_point_for(invocation), result)
        return result if replacement is None else replacement


class AroundInterceptor(MethodInterceptor):
    """Runs ``advice(proceeding_join_point)``; its return value is the result."""

    def invoke(self, invocation: MethodInvocation) -> Any:
        return self.advice(ProceedingJoinPoint(invocation))


_INTERCEPTOR_TYPES = {
    AdviceKind.BEFORE: BeforeInterceptor,
    AdviceKind.AFTER: AfterInterceptor,
    AdviceKind.AFTER_RETURNING: AfterReturningInterceptor,
    AdviceKind.AROUND: AroundInterceptor,
}


def create_interceptor(kind: AdviceKind, advice: Callable) -> MethodInterceptor:
    """Build the interceptor for an advice kind.

    Raises:
        AopConfigError: For an unknown kind or a non-callable advice
    """
    interceptor_type = _INTERCEPTOR_TYPES.get(kind)
    if interceptor_type is None:
        raise AopConfigError(f"Unsupported advice kind: {kind!r}")
    if not callable(advice):
        raise AopConfigError(f"Advice for {kind.name} must be callable, got {type(advice).__name__}")
    return interceptor_type(advice)
