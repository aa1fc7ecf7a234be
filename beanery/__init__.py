from importlib.metadata import PackageNotFoundError, version

# Public API
from .advisor import AdviceKind, Advisor, match_advisors, sort_advisors
from .aspect import after, after_returning, around, aspect, before
from .auto_proxy import AUTO_PROXY_CREATOR_BEAN_NAME, AspectAutoProxyCreator
from .aware import (
    ApplicationContextAware,
    Aware,
    BeanFactoryAware,
    BeanNameAware,
    EnvironmentAware,
)
from .config import ContainerConfig
from .container import BeanFactory
from .context import ConfigurableApplicationContext, DefinitionSource
from .core import ApplicationContext, ApplicationContextAwareProcessor
from .definition import BeanDefinition, BeanReference, FactoryMethod, PropertyAssignment, ref
from .exceptions import (
    AopConfigError,
    BeanCreationError,
    BeanDestructionError,
    BeansError,
    BeanTypeMismatchError,
    CircularConstructorDependencyError,
    CircularDependencyError,
    ContainerClosedError,
    DefinitionFrozenError,
    InstantiationError,
    NotFoundError,
    NotInitializedError,
    PropertyAssignmentError,
)
from .factory_bean import FactoryBean
from .instantiation import InstantiationStrategy, SimpleInstantiationStrategy
from .interceptor import MethodInterceptor
from .invocation import MethodInvocation
from .join_point import JoinPoint, ProceedingJoinPoint
from .lifecycle import BeanScope, ContextState, SingletonState
from .module import BeanModule
from .pointcut import Pointcut
from .processors import BeanFactoryPostProcessor, BeanPostProcessor, DisposableBean, InitializingBean
from .proxy import AopProxy, get_proxy_target, is_aop_proxy
from .registry import BeanDefinitionRegistry
from .singleton_cache import SingletonCache

__all__ = [
    "ApplicationContext",
    "ConfigurableApplicationContext",
    "DefinitionSource",
    "ContainerConfig",
    "BeanFactory",
    "BeanModule",
    "BeanDefinition",
    "BeanDefinitionRegistry",
    "BeanReference",
    "FactoryMethod",
    "PropertyAssignment",
    "ref",
    "BeanScope",
    "ContextState",
    "SingletonState",
    "SingletonCache",
    "InstantiationStrategy",
    "SimpleInstantiationStrategy",
    # Capabilities
    "Aware",
    "ApplicationContextAware",
    "BeanFactoryAware",
    "BeanNameAware",
    "EnvironmentAware",
    "InitializingBean",
    "DisposableBean",
    "FactoryBean",
    "BeanFactoryPostProcessor",
    "BeanPostProcessor",
    "ApplicationContextAwareProcessor",
    # AOP
    "AdviceKind",
    "Advisor",
    "AopProxy",
    "AspectAutoProxyCreator",
    "AUTO_PROXY_CREATOR_BEAN_NAME",
    "JoinPoint",
    "MethodInterceptor",
    "MethodInvocation",
    "Pointcut",
    "ProceedingJoinPoint",
    "after",
    "after_returning",
    "around",
    "aspect",
    "before",
    "get_proxy_target",
    "is_aop_proxy",
    "match_advisors",
    "sort_advisors",
    # Exceptions
    "BeansError",
    "NotFoundError",
    "BeanTypeMismatchError",
    "BeanCreationError",
    "InstantiationError",
    "PropertyAssignmentError",
    "CircularDependencyError",
    "CircularConstructorDependencyError",
    "BeanDestructionError",
    "DefinitionFrozenError",
    "AopConfigError",
    "NotInitializedError",
    "ContainerClosedError",
]

try:
    __version__ = version("beanery")
except PackageNotFoundError:
    # Source checkout without an installed distribution
    __version__ = '0.0.0'
