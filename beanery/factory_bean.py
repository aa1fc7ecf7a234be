"""
FactoryBean

Beans that produce other objects. Looking up a FactoryBean by name returns
its product; prefixing the name with ``&`` returns the factory itself.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type

# Prefix selecting the FactoryBean itself instead of its product
FACTORY_BEAN_PREFIX = "&"

# Placeholder cached for factories that produce None
_NULL_OBJECT = object()


class FactoryBean(ABC):
    """Factory for an object exposed under the factory's bean name.

    Attributes:
        object_type: Product type, used by ``get_beans_of_type``. Optional.

    Example::

        class ConnectionFactory(FactoryBean):
            object_type = Connection

            def get_object(self):
                return Connection(self.url)
    """

    object_type: Optional[Type] = None

    @abstractmethod
    def get_object(self) -> Any:
        pass

    def is_singleton(self) -> bool:
        """Whether the product is shared. Shared products are cached."""
        return True


class FactoryBeanObjectCache:
    """Cache of shared FactoryBean products, keyed by factory bean name."""

    def __init__(self):
        self._objects: Dict[str, Any] = {}

    def get(self, bean_name: str) -> Any:
        """Return the cached product, or None when nothing is cached."""
        cached = self._objects.get(bean_name)
        return None if cached is _NULL_OBJECT else cached

    def contains(self, bean_name: str) -> bool:
        return bean_name in self._objects

    def put(self, bean_name: str, product: Any) -> None:
        self._objects[bean_name] = _NULL_OBJECT if product is None else product

    def remove(self, bean_name: str) -> None:
        self._objects.pop(bean_name, None)

    def clear(self) -> None:
        self._objects.clear()


def is_factory_dereference(name: str) -> bool:
    return name.startswith(FACTORY_BEAN_PREFIX)


def transformed_bean_name(name: str) -> str:
    """Strip the ``&`` prefix(es) from a requested name."""
    while name.startswith(FACTORY_BEAN_PREFIX):
        name = name[len(FACTORY_BEAN_PREFIX):]
    return name
