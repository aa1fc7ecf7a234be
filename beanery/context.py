"""
Context Module

This module provides the ConfigurableApplicationContext abstract interface
for container orchestration, and the DefinitionSource protocol that
anything feeding bean definitions into a context satisfies.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Protocol, Type, TypeVar, runtime_checkable

from .definition import BeanDefinition
from .lifecycle import ContextState

if TYPE_CHECKING:
    from .container import BeanFactory
    from .processors import BeanFactoryPostProcessor

T = TypeVar('T')


@runtime_checkable
class DefinitionSource(Protocol):
    """Anything exposing an iterable of BeanDefinitions.

    BeanModule is the built-in implementation; scanners or configuration
    parsers can feed a context the same way.
    """

    @property
    def definitions(self) -> Iterable[BeanDefinition]:
        ...


class ConfigurableApplicationContext(ABC):
    """Abstract interface for container orchestration.

    Defines the lifecycle contract UNINITIALIZED -> REFRESHING -> ACTIVE
    -> CLOSED, and the lookup operations available on an ACTIVE context.

    Example::

        class TestContext(ConfigurableApplicationContext):
            # ... implement the abstract methods over a prepared BeanFactory ...
            pass
    """

    @property
    @abstractmethod
    def state(self) -> ContextState:
        """Current lifecycle state."""
        pass

    @property
    @abstractmethod
    def bean_factory(self) -> 'BeanFactory':
        """The factory built by the last refresh.

        Raises:
            NotInitializedError: If the context was never refreshed
        """
        pass

    @abstractmethod
    def load_modules(self, modules: List[DefinitionSource]) -> None:
        """Add definition sources, read on the next refresh."""
        pass

    @abstractmethod
    def add_bean_factory_post_processor(self, processor: 'BeanFactoryPostProcessor') -> None:
        """Add a post-processor run before discovered ones on every refresh."""
        pass

    @abstractmethod
    def refresh(self) -> None:
        """Rebuild the container from the loaded definitions.

        Raises:
            ContainerClosedError: If the context is closed
            BeansError: Any failure raised while building the container
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Destroy all singletons and enter the terminal CLOSED state.

        This method is idempotent - calling it multiple times has no effect.
        """
        pass

    @abstractmethod
    def get_bean(self, name: str, required_type: Optional[Type[T]] = None) -> T:
        """Get a bean by name, optionally checking its type.

        Raises:
            NotInitializedError: Before the first refresh
            ContainerClosedError: After close
            NotFoundError: If no bean has that name
        """
        pass

    @abstractmethod
    def get_beans_of_type(self, bean_type: Type[T]) -> Dict[str, T]:
        """Get every bean assignable to ``bean_type``, keyed by name."""
        pass

    @abstractmethod
    def contains_bean(self, name: str) -> bool:
        pass

    def get_environment(self) -> Dict[str, Any]:
        """Environment values handed to EnvironmentAware beans."""
        return dict(self.bean_factory.config.environment)
