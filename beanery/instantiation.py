"""
InstantiationStrategy

Turns a bean definition into a raw instance: the object returned by its
constructor or factory method, before any property is assigned.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

from .definition import BeanDefinition
from .exceptions import BeansError, InstantiationError


class InstantiationStrategy(ABC):
    """Strategy for creating raw bean instances."""

    @abstractmethod
    def instantiate(
        self,
        definition: BeanDefinition,
        args: Sequence[Any],
        factory_bean: Optional[Any] = None,
    ) -> Any:
        """Create the raw instance described by ``definition``.

        Args:
            definition: The bean definition
            args: Resolved positional constructor arguments
            factory_bean: The bean owning ``definition.factory_method``, if any

        Raises:
            InstantiationError: When no usable constructor exists or it fails
        """
        pass


class SimpleInstantiationStrategy(InstantiationStrategy):
    """Instantiates by calling the bean type, or its factory method.

    The callable must accept exactly the supplied arguments: an empty
    argument list selects the no-argument form.
    """

    def instantiate(
        self,
        definition: BeanDefinition,
        args: Sequence[Any],
        factory_bean: Optional[Any] = None,
    ) -> Any:
        constructor = self._select_constructor(definition, factory_bean)
        self._check_arity(definition, constructor, args)
        try:
            return constructor(*args)
        except BeansError:
            raise
        except Exception as e:
            raise InstantiationError(
                definition.name,
                definition.bean_type,
                f"{self._describe(definition)} raised {type(e).__name__}: {e}",
            ) from e

    @staticmethod
    def _select_constructor(definition: BeanDefinition, factory_bean: Optional[Any]) -> Callable:
        factory_method = definition.factory_method
        if factory_method is None:
            return definition.bean_type

        owner = factory_bean if factory_bean is not None else definition.bean_type
        method = getattr(owner, factory_method.method_name, None)
        if method is None or not callable(method):
            owner_name = owner.__name__ if isinstance(owner, type) else type(owner).__name__
            raise InstantiationError(
                definition.name,
                definition.bean_type,
                f"factory method '{factory_method.method_name}' not found on {owner_name}",
            )
        return method

    def _check_arity(self, definition: BeanDefinition, constructor: Callable, args: Sequence[Any]) -> None:
        try:
            signature = inspect.signature(constructor)
        except (TypeError, ValueError):
            # Builtins without an introspectable signature are called as-is
            return
        try:
            signature.bind(*args)
        except TypeError as e:
            raise InstantiationError(
                definition.name,
                definition.bean_type,
                f"no constructor of {self._describe(definition)} accepts "
                f"{len(args)} argument(s): {e}",
            ) from e

    @staticmethod
    def _describe(definition: BeanDefinition) -> str:
        if definition.factory_method is not None:
            return f"factory method '{definition.factory_method.method_name}'"
        return definition.bean_type.__name__
