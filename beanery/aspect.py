"""
Aspect Decorators

Declare aspects as plain classes whose methods carry advice metadata:

    @aspect
    class AuditAspect:
        @before("*Service.save*")
        def log_save(self, join_point):
            print("saving", join_point.args)

        @around("*Service.find*")
        def time_find(self, pjp):
            start = time.perf_counter()
            try:
                return pjp.proceed()
            finally:
                print(time.perf_counter() - start)

Register the aspect as a bean and call ``module.enable_aspects()``.
"""

from typing import Callable, Optional, Tuple, TypeVar, Union

from .advisor import AdviceKind
from .pointcut import Pointcut, as_pointcut

C = TypeVar('C', bound=type)
F = TypeVar('F', bound=Callable)

ASPECT_MARKER = '__beanery_aspect__'
ADVICE_MARKER = '__beanery_advice__'


def aspect(cls: C) -> C:
    """Mark a class as an aspect. Aspect beans are never proxied themselves."""
    setattr(cls, ASPECT_MARKER, True)
    return cls


def is_aspect(cls: type) -> bool:
    return isinstance(cls, type) and cls.__dict__.get(ASPECT_MARKER, False) is True


def get_advice_metadata(func: Callable) -> Optional[Tuple[AdviceKind, Pointcut]]:
    return getattr(func, ADVICE_MARKER, None)


def _advice(kind: AdviceKind, pointcut: Union[str, Pointcut]) -> Callable[[F], F]:
    parsed = as_pointcut(pointcut)

    def decorator(func: F) -> F:
        setattr(func, ADVICE_MARKER, (kind, parsed))
        return func

    return decorator


def before(pointcut: Union[str, Pointcut]) -> Callable[[F], F]:
    """Run ``advice(join_point)`` before the method."""
    return _advice(AdviceKind.BEFORE, pointcut)


def after(pointcut: Union[str, Pointcut]) -> Callable[[F], F]:
    """Run ``advice(join_point)`` after the method, even when it raises."""
    return _advice(AdviceKind.AFTER, pointcut)


def after_returning(pointcut: Union[str, Pointcut]) -> Callable[[F], F]:
    """Run ``advice(join_point, result)`` after a normal return.

    A non-None return value replaces the method's result.
    """
    return _advice(AdviceKind.AFTER_RETURNING, pointcut)


def around(pointcut: Union[str, Pointcut]) -> Callable[[F], F]:
    """Run ``advice(proceeding_join_point)`` in place of the method."""
    return _advice(AdviceKind.AROUND, pointcut)
