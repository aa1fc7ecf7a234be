"""
Awareness Capabilities

Marker interfaces a bean implements to receive container-provided values.
The construction engine checks them with ``isinstance`` after property
population and before any post-processor runs, in a fixed order:
environment, name, factory.
"""

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from .container import BeanFactory
    from .context import ConfigurableApplicationContext


class Aware(ABC):
    """Common base of all awareness capabilities"""
    pass


class EnvironmentAware(Aware):
    """Receives the container's read-only environment mapping."""

    @abstractmethod
    def set_environment(self, environment: Mapping[str, Any]) -> None:
        pass


class BeanNameAware(Aware):
    """Receives the name the bean is registered under."""

    @abstractmethod
    def set_bean_name(self, name: str) -> None:
        pass


class BeanFactoryAware(Aware):
    """Receives the owning BeanFactory."""

    @abstractmethod
    def set_bean_factory(self, bean_factory: 'BeanFactory') -> None:
        pass


class ApplicationContextAware(Aware):
    """Receives the owning ApplicationContext.

    Delivered by ApplicationContextAwareProcessor, not by the engine.
    """

    @abstractmethod
    def set_application_context(self, context: 'ConfigurableApplicationContext') -> None:
        pass


def invoke_aware_methods(
    bean: Any,
    bean_name: str,
    bean_factory: 'BeanFactory',
    environment: Mapping[str, Any],
) -> None:
    """Inject name, environment and factory into a bean that asks for them."""
    if not isinstance(bean, Aware):
        return
    if isinstance(bean, EnvironmentAware):
        bean.set_environment(MappingProxyType(dict(environment)))
    if isinstance(bean, BeanNameAware):
        bean.set_bean_name(bean_name)
    if isinstance(bean, BeanFactoryAware):
        bean.set_bean_factory(bean_factory)
