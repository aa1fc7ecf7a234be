"""
MethodInvocation

One intercepted call travelling through its interceptor chain
"""

from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Sequence, Tuple

from .exceptions import AopConfigError

if TYPE_CHECKING:
    from .interceptor import MethodInterceptor


class MethodInvocation:
    """Cursor over an ordered interceptor chain.

    Each ``proceed()`` call hands control to the next interceptor; once the
    chain is exhausted it calls the real method with the original
    arguments. Only ``proceed()`` moves the cursor.

    A new invocation is created for every proxied call, so concurrent calls
    never share a cursor.

    Example::

        invocation = MethodInvocation(target, target.save, ("alice",), {}, interceptors)
        result = invocation.proceed()

    Raises:
        AopConfigError: When constructed with no interceptors
    """

    def __init__(
        self,
        target: Any,
        method: Callable,
        args: Tuple[Any, ...],
        kwargs: Optional[Dict[str, Any]],
        interceptors: Sequence['MethodInterceptor'],
    ):
        if not interceptors:
            raise AopConfigError(
                f"MethodInvocation for {type(target).__qualname__}."
                f"{getattr(method, '__name__', method)} needs at least one interceptor"
            )
        self.target = target
        self.method = method
        self.args = tuple(args)
        self.kwargs = dict(kwargs or {})
        self.interceptors = tuple(interceptors)
        self._index = -1

    @property
    def method_name(self) -> str:
        return getattr(self.method, "__name__", repr(self.method))

    def proceed(self) -> Any:
        """Invoke the next interceptor, or the real method at the end of the chain.

        Calling it again once the chain is exhausted invokes the real method
        again, which lets the innermost around advice retry.
        """
        if self._index == len(self.interceptors) - 1:
            return self.method(*self.args, **self.kwargs)
        self._index += 1
        return self.interceptors[self._index].invoke(self)
