"""
Post-Processors

Extension capabilities discovered by the ApplicationContext during refresh,
and the ordered pipeline that applies bean post-processors to every bean.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, List

if TYPE_CHECKING:
    from .container import BeanFactory

logger = logging.getLogger(__name__)


class BeanFactoryPostProcessor(ABC):
    """Hook run once per refresh, before any singleton is built.

    May inspect and mutate the registered bean definitions.

    Example::

        class RetryOverride(BeanFactoryPostProcessor):
            def post_process_bean_factory(self, bean_factory):
                bean_factory.get_bean_definition("job").set_property("retries", 5)
    """

    @abstractmethod
    def post_process_bean_factory(self, bean_factory: 'BeanFactory') -> None:
        pass


class BeanPostProcessor(ABC):
    """Hook around each bean's initialization.

    Both hooks may return a replacement bean. Returning None keeps the
    bean handed in. The defaults return the bean unchanged.
    """

    def post_process_before_initialization(self, bean: Any, bean_name: str) -> Any:
        """Called after awareness injection, before the init method."""
        return bean

    def post_process_after_initialization(self, bean: Any, bean_name: str) -> Any:
        """Called after the init method. This is where proxies are substituted."""
        return bean


class InitializingBean(ABC):
    """Beans that need a callback once their properties are set."""

    @abstractmethod
    def after_properties_set(self) -> None:
        pass


class DisposableBean(ABC):
    """Beans that release resources when their container closes."""

    @abstractmethod
    def destroy(self) -> None:
        pass


class PostProcessorPipeline:
    """Ordered list of BeanPostProcessors.

    Processors run in registration order; adding the same processor twice
    has no effect.
    """

    def __init__(self):
        self._processors: List[BeanPostProcessor] = []

    def add(self, processor: BeanPostProcessor) -> None:
        if processor not in self._processors:
            self._processors.append(processor)

    @property
    def processors(self) -> List[BeanPostProcessor]:
        return list(self._processors)

    def __len__(self) -> int:
        return len(self._processors)

    def apply_before_initialization(self, bean: Any, bean_name: str) -> Any:
        result = bean
        for processor in self._processors:
            current = processor.post_process_before_initialization(result, bean_name)
            if current is None:
                return result
            if current is not result:
                logger.debug(
                    "%s replaced bean '%s' before initialization",
                    type(processor).__name__, bean_name,
                )
            result = current
        return result

    def apply_after_initialization(self, bean: Any, bean_name: str) -> Any:
        result = bean
        for processor in self._processors:
            current = processor.post_process_after_initialization(result, bean_name)
            if current is None:
                return result
            if current is not result:
                logger.debug(
                    "%s replaced bean '%s' after initialization",
                    type(processor).__name__, bean_name,
                )
            result = current
        return result
