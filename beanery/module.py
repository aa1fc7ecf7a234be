"""
BeanModule

This module provides the definition source used to declare beans.
A BeanModule holds bean definitions, which are then loaded into an
ApplicationContext on refresh.

Key features:
- Subscript DSL syntax: module.single[Type]() and module.prototype[Type]()
- ``ref("name")`` for references to other beans
- Context manager support for cleaner definition blocks

Example::

    module = BeanModule()
    with module:
        module.single[UserDao]()
        module.single[UserService](properties={"dao": ref("userDao")})
        module.prototype[Job](constructor_args=[ref("userService"), 3])

    context = ApplicationContext(modules=[module])
"""

from typing import List, Optional

from .auto_proxy import AUTO_PROXY_CREATOR_BEAN_NAME, AspectAutoProxyCreator
from .definition import BeanDefinition
from .prototype_builder import PrototypeBuilder
from .singleton_builder import SingletonBuilder


class BeanModule:
    """Definition source for the subscript DSL.

    Attributes:
        single: Builder for singleton registrations
        prototype: Builder for prototype registrations
        _definitions: Internal list of registered definitions

    Example::

        module = BeanModule()
        with module:
            # Singleton - same instance every time
            module.single[Database](init_method="connect", destroy_method="close")

            # Prototype - new instance every time
            module.prototype[Session](properties={"db": ref("database")})
    """

    def __init__(self, lazy_init: Optional[bool] = None):
        """Initialize a new module with empty definitions.

        Args:
            lazy_init: Default lazy flag of this module's definitions.
                None defers to the container configuration.
        """
        self._definitions: List[BeanDefinition] = []
        self._lazy_init: Optional[bool] = lazy_init
        self.single = SingletonBuilder(self)
        self.prototype = PrototypeBuilder(self)

    def __enter__(self) -> 'BeanModule':
        """Enter context manager for cleaner definition blocks.

        The context manager is optional but provides visual structure
        for module definitions.

        Returns:
            The module instance itself
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        return False

    @property
    def definitions(self) -> List[BeanDefinition]:
        """Get registered definitions (read-only access for the context).

        Returns:
            List of BeanDefinition objects in registration order
        """
        return list(self._definitions)

    def add_definition(self, definition: BeanDefinition) -> None:
        """Add a definition to the module.

        Used by the definition builders; may also be called directly with a
        hand-built BeanDefinition.

        Note:
            Duplicate names are not checked. The context registers
            definitions in order, so a later one overrides an earlier one.
        """
        self._definitions.append(definition)

    def enable_aspects(self) -> BeanDefinition:
        """Register the AspectAutoProxyCreator.

        Beans of ``@aspect`` classes registered in any loaded module then
        advise every matching bean.
        """
        definition = BeanDefinition(AUTO_PROXY_CREATOR_BEAN_NAME, AspectAutoProxyCreator)
        self.add_definition(definition)
        return definition

    def __len__(self) -> int:
        return len(self._definitions)
