"""
DefinitionBuilder

This module provides the base class for definition builders that support
the type parameter syntax (e.g., single[Type], prototype[Type]).

The DefinitionBuilder performs:
- Type parameter extraction via __getitem__
- Default bean name derivation from the type
- Normalization of properties, constructor arguments and factory methods
- Definition creation and registration

This class is extended by SingletonBuilder and PrototypeBuilder to provide
the specific scope behaviors.
"""

from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, TypeVar, Union

from .definition import BeanDefinition, FactoryMethod, PropertyAssignment
from .lifecycle import BeanScope

if TYPE_CHECKING:
    from .module import BeanModule

T = TypeVar('T')

Properties = Union[Dict[str, Any], Iterable[Union[PropertyAssignment, Tuple[str, Any]]]]


def default_bean_name(bean_type: Type) -> str:
    """Derive a bean name from a class name.

    The first letter is lowercased, unless the first two letters are both
    uppercase (an acronym), in which case the name is kept as-is.

    Example::

        >>> default_bean_name(UserService)
        'userService'
        >>> default_bean_name(URLResolver)
        'URLResolver'
    """
    name = bean_type.__name__
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[:1].lower() + name[1:]


class DefinitionBuilder:
    """Base class for definition builders supporting type parameters.

    This class implements the subscript syntax (builder[Type]) that turns
    keyword options into a BeanDefinition registered on the module.

    Attributes:
        module: The BeanModule to register definitions to
        scope: The scope (SINGLETON or PROTOTYPE) for created definitions

    Note:
        This class is not used directly. Use SingletonBuilder or
        PrototypeBuilder via module.single or module.prototype instead.
    """

    def __init__(self, module: 'BeanModule', scope: BeanScope):
        self.module = module
        self.scope = scope

    def __getitem__(self, bean_type: Type[T]) -> Callable[..., BeanDefinition]:
        """Enable subscript syntax: builder[Type](name, **options).

        Args:
            bean_type: The class to instantiate, or the product type of a
                factory method

        Returns:
            A registration function returning the registered definition

        Example::

            # This syntax:
            module.single[UserService]("userService", properties={"dao": ref("userDao")})

            # Is equivalent to:
            register = module.single[UserService]
            register("userService", properties={"dao": ref("userDao")})
        """

        def register(
            name: Optional[str] = None,
            *,
            properties: Optional[Properties] = None,
            constructor_args: Optional[Iterable[Any]] = None,
            init_method: Optional[str] = None,
            destroy_method: Optional[str] = None,
            factory_method: Optional[Union[str, FactoryMethod]] = None,
            factory_bean: Optional[str] = None,
            lazy_init: Optional[bool] = None,
        ) -> BeanDefinition:
            # Definition-level lazy_init wins over the module default
            effective_lazy_init = lazy_init if lazy_init is not None else self.module._lazy_init

            definition = BeanDefinition(
                name=name or default_bean_name(bean_type),
                bean_type=bean_type,
                scope=self.scope,
                properties=self._normalize_properties(properties),
                constructor_args=list(constructor_args or []),
                init_method=init_method,
                destroy_method=destroy_method,
                factory_method=self._normalize_factory_method(factory_method, factory_bean),
                lazy_init=effective_lazy_init,
            )
            self.module.add_definition(definition)
            return definition

        return register

    @staticmethod
    def _normalize_properties(properties: Optional[Properties]) -> List[PropertyAssignment]:
        if properties is None:
            return []
        if isinstance(properties, dict):
            return [PropertyAssignment(name, value) for name, value in properties.items()]

        assignments = []
        for item in properties:
            if isinstance(item, PropertyAssignment):
                assignments.append(PropertyAssignment(item.name, item.value))
            else:
                name, value = item
                assignments.append(PropertyAssignment(name, value))
        return assignments

    @staticmethod
    def _normalize_factory_method(
        factory_method: Optional[Union[str, FactoryMethod]],
        factory_bean: Optional[str],
    ) -> Optional[FactoryMethod]:
        if factory_method is None:
            if factory_bean is not None:
                raise ValueError("factory_bean requires a factory_method")
            return None
        if isinstance(factory_method, FactoryMethod):
            return factory_method
        return FactoryMethod(factory_method, factory_bean)
