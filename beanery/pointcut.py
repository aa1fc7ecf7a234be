"""
Pointcut

Type-level and method-level predicates selecting the join points an
advisor applies to.
"""

import re
from fnmatch import fnmatchcase
from typing import Callable, List, Optional

from .exceptions import AopConfigError

TypeMatcher = Callable[[type], bool]
MethodMatcher = Callable[[type, str], bool]

_EXECUTION = re.compile(r"^\s*execution\s*\((.*)\)\s*$")


def _any_type(target_type: type) -> bool:
    return True


def _any_method(target_type: type, method_name: str) -> bool:
    return True


def _type_names(target_type: type) -> List[str]:
    """Qualified and bare names of every class in the MRO except ``object``."""
    names = []
    for klass in target_type.__mro__:
        if klass is object:
            continue
        names.append(f"{klass.__module__}.{klass.__qualname__}")
        names.append(klass.__qualname__)
    return names


class Pointcut:
    """Pair of predicates: which types, and which of their methods.

    Example::

        pointcut = Pointcut.parse("*Service.save*")
        pointcut.matches_type(UserService)                 # True
        pointcut.matches_method(UserService, "save_user")  # True

        audited = Pointcut.parse("*Service.*") & Pointcut.parse("*.save*")
    """

    def __init__(
        self,
        type_matcher: Optional[TypeMatcher] = None,
        method_matcher: Optional[MethodMatcher] = None,
        expression: Optional[str] = None,
    ):
        self.type_matcher = type_matcher or _any_type
        self.method_matcher = method_matcher or _any_method
        self.expression = expression

    def matches_type(self, target_type: type) -> bool:
        return bool(self.type_matcher(target_type))

    def matches_method(self, target_type: type, method_name: str) -> bool:
        return self.matches_type(target_type) and bool(self.method_matcher(target_type, method_name))

    @classmethod
    def parse(cls, expression: str) -> 'Pointcut':
        """Build a pointcut from ``"<type glob>.<method glob>"``.

        The expression may be wrapped in ``execution(...)``. The type glob
        is split from the method glob at the last dot and matched with
        ``fnmatch`` against the qualified and bare names of each class in
        the target's MRO, so a pointcut on a base class also selects its
        subclasses.

        Raises:
            AopConfigError: When the expression has no method part
        """
        if not isinstance(expression, str):
            raise AopConfigError(f"Pointcut expression must be a string, got {type(expression).__name__}")

        body = expression
        match = _EXECUTION.match(expression)
        if match:
            body = match.group(1)
        body = body.strip()

        type_glob, sep, method_glob = body.rpartition(".")
        if not sep or not type_glob or not method_glob:
            raise AopConfigError(
                f"Malformed pointcut expression '{expression}': "
                f"expected '<type pattern>.<method pattern>'"
            )

        def type_matcher(target_type: type) -> bool:
            return any(fnmatchcase(name, type_glob) for name in _type_names(target_type))

        def method_matcher(target_type: type, method_name: str) -> bool:
            return fnmatchcase(method_name, method_glob)

        return cls(type_matcher, method_matcher, expression)

    @classmethod
    def for_type(cls, target_type: type) -> 'Pointcut':
        """Match every method of ``target_type`` and its subclasses."""
        return cls(lambda t: issubclass(t, target_type), expression=f"{target_type.__qualname__}.*")

    def __and__(self, other: 'Pointcut') -> 'Pointcut':
        return Pointcut(
            lambda t: self.matches_type(t) and other.matches_type(t),
            lambda t, m: self.matches_method(t, m) and other.matches_method(t, m),
            f"({self} && {other})",
        )

    def __or__(self, other: 'Pointcut') -> 'Pointcut':
        # The method predicate re-checks each side's type predicate
        return Pointcut(
            lambda t: self.matches_type(t) or other.matches_type(t),
            lambda t, m: self.matches_method(t, m) or other.matches_method(t, m),
            f"({self} || {other})",
        )

    def __repr__(self) -> str:
        return f"Pointcut({self.expression!r})" if self.expression else "Pointcut(<custom>)"

    def __str__(self) -> str:
        return self.expression or "<custom>"


def as_pointcut(value) -> Pointcut:
    """Accept a Pointcut or an expression string."""
    if isinstance(value, Pointcut):
        return value
    return Pointcut.parse(value)
