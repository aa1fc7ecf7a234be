"""
AopProxy

This module provides the dynamic proxy that stands in for an advised bean.
The proxy wraps the target explicitly: attribute reads and writes are
forwarded, and methods with a non-empty interceptor chain are replaced by a
wrapper that runs a fresh MethodInvocation per call.

Python looks dunder methods (``__len__``, ``__call__``, operators, ...) up on
the proxy type, not through ``__getattr__``. ``create_proxy`` therefore uses
a subclass per target type that forwards the protocols the target class
implements. Dunder methods are forwarded but never intercepted.
"""

import functools
import inspect
import logging
import threading
from typing import Any, Callable, Dict, List, Sequence

from .advisor import Advisor
from .interceptor import MethodInterceptor, create_interceptor
from .invocation import MethodInvocation

logger = logging.getLogger(__name__)

AdviceResolver = Callable[[Advisor], Callable]

# Protocols forwarded to the target when its class implements them
FORWARDED_DUNDERS = (
    "__call__", "__len__", "__bool__", "__iter__", "__next__", "__reversed__",
    "__contains__", "__getitem__", "__setitem__", "__delitem__",
    "__enter__", "__exit__", "__aenter__", "__aexit__",
    "__aiter__", "__anext__", "__await__",
    "__eq__", "__ne__", "__lt__", "__le__", "__gt__", "__ge__", "__hash__",
    "__str__", "__int__", "__float__", "__index__",
)

_proxy_classes: Dict[type, type] = {}
_proxy_classes_lock = threading.Lock()


class AopProxy:
    """Explicit decorator around an advised bean.

    ``__class__`` reports the target's class, so ``isinstance`` checks and
    ABC capability tags keep holding for the proxy. ``type(proxy)`` is
    still ``AopProxy``, or the subclass built by ``proxy_class_for``; use
    ``is_aop_proxy`` to tell them apart.

    Attributes:
        _aop_target: The unproxied bean
        _aop_chains: Interceptor chain per method name

    Example::

        proxy = AopProxy(service, {"save": [BeforeInterceptor(log_call)]})
        proxy.save("alice")           # log_call runs first
        isinstance(proxy, UserService)  # True
    """

    __slots__ = ('_aop_target', '_aop_chains')

    def __init__(self, target: Any, chains: Dict[str, List[MethodInterceptor]]):
        object.__setattr__(self, '_aop_target', target)
        object.__setattr__(self, '_aop_chains', {name: list(chain) for name, chain in chains.items() if chain})

    @property
    def __class__(self):
        return type(self._aop_target)

    def __getattr__(self, name: str) -> Any:
        target = self._aop_target
        value = getattr(target, name)
        chain = self._aop_chains.get(name)
        if not chain or not callable(value):
            return value

        @functools.wraps(value)
        def intercepted(*args, **kwargs):
            return MethodInvocation(target, value, args, kwargs, chain).proceed()

        return intercepted

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._aop_target, name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self._aop_target, name)

    def __dir__(self):
        return dir(self._aop_target)

    def __repr__(self) -> str:
        return f"AopProxy({self._aop_target!r})"


def is_aop_proxy(obj: Any) -> bool:
    return issubclass(type(obj), AopProxy)


def get_proxy_target(obj: Any) -> Any:
    """Return the unproxied bean, or ``obj`` itself when it is not a proxy."""
    while issubclass(type(obj), AopProxy):
        obj = object.__getattribute__(obj, '_aop_target')
    return obj


def candidate_methods(target_type: type) -> List[str]:
    """Public routines of ``target_type``, including inherited ones."""
    names = []
    for name in dir(target_type):
        if name.startswith('_'):
            continue
        if inspect.isroutine(inspect.getattr_static(target_type, name)):
            names.append(name)
    return names


def build_chains(
    target_type: type,
    advisors: Sequence[Advisor],
    resolve_advice: AdviceResolver,
) -> Dict[str, List[MethodInterceptor]]:
    """Build the interceptor chain of each candidate method.

    Args:
        target_type: The bean's class
        advisors: Advisors already matched by type, in chain order
        resolve_advice: Turns an advisor into its advice callable

    Returns:
        Method name to non-empty interceptor chain
    """
    interceptors: Dict[int, MethodInterceptor] = {}
    chains: Dict[str, List[MethodInterceptor]] = {}
    for method_name in candidate_methods(target_type):
        chain = []
        for index, advisor in enumerate(advisors):
            if not advisor.matches_method(target_type, method_name):
                continue
            if index not in interceptors:
                interceptors[index] = create_interceptor(advisor.kind, resolve_advice(advisor))
            chain.append(interceptors[index])
        if chain:
            chains[method_name] = chain
    return chains


def _forward(name: str) -> Callable:
    def forward(self, *args, **kwargs):
        target = object.__getattribute__(self, '_aop_target')
        return getattr(type(target), name)(target, *args, **kwargs)

    forward.__name__ = name
    return forward


def _defined_below_object(target_type: type, name: str) -> bool:
    return any(name in vars(klass) for klass in target_type.__mro__ if klass is not object)


def proxy_class_for(target_type: type) -> type:
    """AopProxy subclass forwarding the dunder protocols of ``target_type``.

    Classes are built once per target type. A type implementing none of
    the forwarded protocols uses AopProxy itself.
    """
    with _proxy_classes_lock:
        proxy_class = _proxy_classes.get(target_type)
        if proxy_class is not None:
            return proxy_class

        namespace: Dict[str, Any] = {'__slots__': ()}
        for name in FORWARDED_DUNDERS:
            if not _defined_below_object(target_type, name):
                continue
            if name == '__hash__' and getattr(target_type, '__hash__') is None:
                namespace[name] = None
            else:
                namespace[name] = _forward(name)

        if len(namespace) == 1:
            proxy_class = AopProxy
        else:
            proxy_class = type(f"AopProxy[{target_type.__qualname__}]", (AopProxy,), namespace)
        _proxy_classes[target_type] = proxy_class
        return proxy_class


def create_proxy(target: Any, advisors: Sequence[Advisor], resolve_advice: AdviceResolver) -> AopProxy:
    chains = build_chains(type(target), advisors, resolve_advice)
    logger.debug(
        "Creating AOP proxy for %s with %d advised method(s)",
        type(target).__qualname__, len(chains),
    )
    return proxy_class_for(type(target))(target, chains)
