"""
AspectAutoProxyCreator

Bean post-processor that wraps advised beans in an AopProxy after their
initialization.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from .advisor import Advisor, match_advisors
from .aspect import get_advice_metadata, is_aspect
from .aware import BeanFactoryAware
from .exceptions import AopConfigError
from .processors import BeanFactoryPostProcessor, BeanPostProcessor
from .proxy import create_proxy, is_aop_proxy

if TYPE_CHECKING:
    from .container import BeanFactory

logger = logging.getLogger(__name__)

# Bean name under which BeanModule.enable_aspects() registers the creator
AUTO_PROXY_CREATOR_BEAN_NAME = "beanery.internalAutoProxyCreator"


class AspectAutoProxyCreator(BeanPostProcessor, BeanFactoryAware):
    """Proxies every bean matched by at least one advisor's type predicate.

    Advisors come from two places:

    - ``@aspect`` classes registered as beans; each advice-decorated method
      becomes an advisor whose advice is that method on the aspect bean
    - ``add_advisor()`` calls

    Aspects, post-processors and existing proxies are never proxied.
    Aspect advisors are collected on first use and collected again whenever
    the registry has changed since.
    """

    def __init__(self):
        self._bean_factory: Optional['BeanFactory'] = None
        self._added: List[Advisor] = []
        self._discovered: Optional[List[Advisor]] = None
        self._discovered_revision: Optional[int] = None

    def set_bean_factory(self, bean_factory: 'BeanFactory') -> None:
        self._bean_factory = bean_factory

    def add_advisor(self, advisor: Advisor) -> None:
        self._added.append(advisor)

    @property
    def advisors(self) -> List[Advisor]:
        """Aspect advisors in registration order, then added ones."""
        return self._discover() + self._added

    def post_process_after_initialization(self, bean: Any, bean_name: str) -> Any:
        if self._is_infrastructure(bean):
            return bean

        advisors = match_advisors(self.advisors, type(bean))
        if not advisors:
            return bean

        logger.debug("Bean '%s' matched %d advisor(s)", bean_name, len(advisors))
        return create_proxy(bean, advisors, self._resolve_advice)

    @staticmethod
    def _is_infrastructure(bean: Any) -> bool:
        return (
            is_aop_proxy(bean)
            or is_aspect(type(bean))
            or isinstance(bean, (BeanPostProcessor, BeanFactoryPostProcessor))
        )

    def _discover(self) -> List[Advisor]:
        if self._bean_factory is None:
            return []
        registry = self._bean_factory.registry
        if self._discovered is None or self._discovered_revision != registry.revision:
            discovered: List[Advisor] = []
            for definition in registry.definitions():
                if is_aspect(definition.bean_type):
                    discovered.extend(advisors_of_aspect(definition.name, definition.bean_type))
            self._discovered = discovered
            self._discovered_revision = registry.revision
        return self._discovered

    def _resolve_advice(self, advisor: Advisor) -> Callable:
        if callable(advisor.advice):
            return advisor.advice
        if advisor.aspect_name is None or self._bean_factory is None:
            raise AopConfigError(
                f"Advice '{advisor.advice}' names a method but has no aspect bean to call it on"
            )
        aspect_bean = self._bean_factory.get_bean(advisor.aspect_name)
        method = getattr(aspect_bean, advisor.advice, None)
        if method is None or not callable(method):
            raise AopConfigError(
                f"Aspect '{advisor.aspect_name}' has no advice method '{advisor.advice}'"
            )
        return method


def advisors_of_aspect(aspect_name: str, aspect_type: type) -> List[Advisor]:
    """Advisors declared by an aspect class, in declaration order.

    Base class advice comes first. An override without a decorator
    removes the inherited advice.
    """
    declared = {}
    for klass in reversed(aspect_type.__mro__):
        for attr_name, member in vars(klass).items():
            metadata = get_advice_metadata(member)
            if metadata is not None:
                declared[attr_name] = metadata
            elif attr_name in declared:
                del declared[attr_name]
    return [
        Advisor(aspect_name, kind, attr_name, pointcut)
        for attr_name, (kind, pointcut) in declared.items()
    ]
