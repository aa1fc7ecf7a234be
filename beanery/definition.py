"""
Definition

Data classes describing how a bean is built and wired
"""

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Type

from .exceptions import DefinitionFrozenError
from .lifecycle import BeanScope


@dataclass(frozen=True)
class BeanReference:
    """Symbolic reference to another bean, resolved lazily by name"""
    bean_name: str


def ref(bean_name: str) -> BeanReference:
    """Shorthand for ``BeanReference(bean_name)``."""
    return BeanReference(bean_name)


@dataclass
class PropertyAssignment:
    """Field name plus a literal value or a BeanReference"""
    name: str
    value: Any


@dataclass(frozen=True)
class FactoryMethod:
    """Method used instead of the bean type's constructor.

    With ``factory_bean_name`` the method is looked up on that bean;
    otherwise it is a static or class method of the bean type.
    """
    method_name: str
    factory_bean_name: Optional[str] = None


@dataclass
class BeanDefinition:
    """Declarative description of a bean.

    Attributes:
        name: Unique registry key
        bean_type: Class to instantiate (or the product type of a factory method)
        scope: SINGLETON (one shared instance) or PROTOTYPE (new per request)
        properties: Ordered field assignments applied after instantiation
        constructor_args: Positional arguments, literals or BeanReferences
        init_method: Name of a no-argument method called after population
        destroy_method: Name of a no-argument method called on close
        factory_method: Optional FactoryMethod replacing the constructor
        lazy_init: Skip eager creation at refresh; None defers to the container
    """
    name: str
    bean_type: Type
    scope: BeanScope = BeanScope.SINGLETON
    properties: List[PropertyAssignment] = field(default_factory=list)
    constructor_args: List[Any] = field(default_factory=list)
    init_method: Optional[str] = None
    destroy_method: Optional[str] = None
    factory_method: Optional[FactoryMethod] = None
    lazy_init: Optional[bool] = None
    _frozen: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def is_singleton(self) -> bool:
        return self.scope == BeanScope.SINGLETON

    @property
    def is_prototype(self) -> bool:
        return self.scope == BeanScope.PROTOTYPE

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Mark construction as started. Further mutation is rejected."""
        self._frozen = True

    def copy(self) -> 'BeanDefinition':
        """Return an unfrozen copy with its own property and argument lists.

        Every refresh registers copies, so factory post-processor changes
        and freezing never leak back into the definition source.
        """
        return replace(
            self,
            properties=[PropertyAssignment(p.name, p.value) for p in self.properties],
            constructor_args=list(self.constructor_args),
        )

    def get_property(self, name: str) -> Optional[PropertyAssignment]:
        for assignment in self.properties:
            if assignment.name == name:
                return assignment
        return None

    def set_property(self, name: str, value: Any) -> None:
        """Replace the value of an existing assignment, or append a new one.

        Replacing keeps the assignment's original position, so population
        order is unchanged.

        Raises:
            DefinitionFrozenError: When construction has already started
        """
        self._ensure_not_frozen()
        existing = self.get_property(name)
        if existing is not None:
            existing.value = value
        else:
            self.properties.append(PropertyAssignment(name, value))

    def remove_property(self, name: str) -> None:
        self._ensure_not_frozen()
        self.properties = [p for p in self.properties if p.name != name]

    def _ensure_not_frozen(self) -> None:
        if self._frozen:
            raise DefinitionFrozenError(
                f"Bean definition '{self.name}' can no longer be modified: "
                f"construction has already started"
            )
