"""
ApplicationContext

This module provides the container orchestrator. An ApplicationContext
reads bean definitions from its modules, builds a BeanFactory on
``refresh()``, discovers the extension beans (factory post-processors and
bean post-processors), eagerly creates non-lazy singletons, and destroys
them on ``close()``.

Example::

    module = BeanModule()
    with module:
        module.single[UserDao]()
        module.single[UserService](properties={"dao": ref("userDao")})

    with ApplicationContext(modules=[module]) as context:
        service = context.get_bean("userService", UserService)
    # close() is called automatically
"""

import atexit
import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from .aware import ApplicationContextAware
from .config import ContainerConfig
from .container import BeanFactory
from .context import ConfigurableApplicationContext, DefinitionSource
from .exceptions import ContainerClosedError, NotInitializedError
from .lifecycle import ContextState
from .processors import BeanFactoryPostProcessor, BeanPostProcessor

T = TypeVar('T')

logger = logging.getLogger(__name__)


class ApplicationContextAwareProcessor(BeanPostProcessor):
    """Hands the owning context to ApplicationContextAware beans.

    Registered first on every refresh, so it runs before any discovered
    post-processor.
    """

    def __init__(self, context: ConfigurableApplicationContext):
        self._context = context

    def post_process_before_initialization(self, bean: Any, bean_name: str) -> Any:
        if isinstance(bean, ApplicationContextAware):
            bean.set_application_context(self._context)
        return bean


class ApplicationContext(ConfigurableApplicationContext):
    """Container orchestrator.

    States move UNINITIALIZED -> REFRESHING -> ACTIVE -> CLOSED. A failed
    refresh returns to UNINITIALIZED. CLOSED is terminal.

    Attributes:
        _config: Container settings, shared with every BeanFactory built
        _sources: Definition sources read on each refresh
        _bean_factory: Factory built by the last successful refresh
        _state: Current lifecycle state

    Example::

        context = ApplicationContext(config=ContainerConfig(default_lazy_init=True))
        context.load_modules([module])
        context.refresh()
        dao = context.get_bean("userDao")
        context.close()
    """

    def __init__(
        self,
        modules: Optional[Sequence[DefinitionSource]] = None,
        config: Optional[ContainerConfig] = None,
    ):
        """Create a context, refreshing it right away when modules are given.

        Args:
            modules: Definition sources, typically BeanModules (optional)
            config: Container settings (optional)
        """
        self._config: ContainerConfig = config or ContainerConfig()
        self._sources: List[DefinitionSource] = []
        self._bean_factory_post_processors: List[BeanFactoryPostProcessor] = []
        self._bean_factory: Optional[BeanFactory] = None
        self._state: ContextState = ContextState.UNINITIALIZED
        self._lock = threading.RLock()
        self._shutdown_hook_registered = False

        if self._config.register_shutdown_hook:
            self.register_shutdown_hook()

        if modules:
            self.load_modules(modules)
            self.refresh()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ContextState:
        return self._state

    @property
    def config(self) -> ContainerConfig:
        return self._config

    @property
    def is_active(self) -> bool:
        return self._state == ContextState.ACTIVE

    @property
    def is_closed(self) -> bool:
        return self._state == ContextState.CLOSED

    @property
    def bean_factory(self) -> BeanFactory:
        self._ensure_not_closed()
        if self._bean_factory is None:
            raise NotInitializedError("ApplicationContext has not been refreshed yet")
        return self._bean_factory

    def _ensure_not_closed(self) -> None:
        """Ensure the context is not closed.

        Raises:
            ContainerClosedError: When the context has been closed
        """
        if self._state == ContextState.CLOSED:
            raise ContainerClosedError("This ApplicationContext is already closed")

    def _ensure_usable(self) -> BeanFactory:
        # Beans may look up collaborators through the context while it refreshes
        self._ensure_not_closed()
        if self._bean_factory is None or self._state == ContextState.UNINITIALIZED:
            raise NotInitializedError(
                "ApplicationContext has not been refreshed yet. "
                "Pass modules to the constructor or call refresh() first."
            )
        return self._bean_factory

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def load_modules(self, modules: Sequence[DefinitionSource]) -> None:
        """Add definition sources. They are read on the next ``refresh()``.

        Raises:
            ContainerClosedError: When the context has been closed
        """
        self._ensure_not_closed()
        self._sources.extend(modules)

    def add_bean_factory_post_processor(self, processor: BeanFactoryPostProcessor) -> None:
        self._ensure_not_closed()
        self._bean_factory_post_processors.append(processor)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Build a fresh container from the loaded definition sources.

        Steps, in order:

        1. Register every definition from every source
        2. Register ApplicationContextAwareProcessor
        3. Run added, then discovered, BeanFactoryPostProcessors
        4. Register discovered BeanPostProcessors in discovery order
        5. Create every non-lazy singleton

        On failure the singletons created so far are destroyed, the context
        returns to UNINITIALIZED and the error propagates.

        Raises:
            ContainerClosedError: When the context has been closed
        """
        with self._lock:
            self._ensure_not_closed()
            if self._state == ContextState.ACTIVE and self._bean_factory is not None:
                logger.warning(
                    "Refreshing an active context: %d existing singleton(s) are "
                    "dropped without being destroyed",
                    len(self._bean_factory.singleton_cache.names()),
                )

            self._state = ContextState.REFRESHING
            bean_factory = BeanFactory(self._config)
            self._bean_factory = bean_factory

            try:
                self._load_bean_definitions(bean_factory)
                bean_factory.add_bean_post_processor(ApplicationContextAwareProcessor(self))
                self._invoke_bean_factory_post_processors(bean_factory)
                self._register_bean_post_processors(bean_factory)
                bean_factory.pre_instantiate_singletons()
            except Exception:
                logger.error("Context refresh failed; destroying singletons created so far")
                bean_factory.destroy_singletons()
                self._bean_factory = None
                self._state = ContextState.UNINITIALIZED
                raise

            self._state = ContextState.ACTIVE
            logger.info(
                "ApplicationContext refreshed: %d bean definition(s), %d singleton(s)",
                len(bean_factory.registry), len(bean_factory.singleton_cache.names()),
            )

    def _load_bean_definitions(self, bean_factory: BeanFactory) -> None:
        for source in self._sources:
            for definition in source.definitions:
                bean_factory.register_bean_definition(definition.copy())

    def _invoke_bean_factory_post_processors(self, bean_factory: BeanFactory) -> None:
        for processor in self._bean_factory_post_processors:
            processor.post_process_bean_factory(bean_factory)

        discovered = bean_factory.get_beans_of_type(BeanFactoryPostProcessor)
        for name, processor in discovered.items():
            if processor in self._bean_factory_post_processors:
                continue
            logger.debug("Invoking BeanFactoryPostProcessor '%s'", name)
            processor.post_process_bean_factory(bean_factory)

    @staticmethod
    def _register_bean_post_processors(bean_factory: BeanFactory) -> None:
        discovered = bean_factory.get_beans_of_type(BeanPostProcessor)
        for name, processor in discovered.items():
            logger.debug("Registering BeanPostProcessor '%s'", name)
            bean_factory.add_bean_post_processor(processor)

    def close(self) -> None:
        """Destroy all singletons and close the context.

        Destroy failures are logged, never raised. After closing, the
        context rejects every lookup with ContainerClosedError.

        This method is idempotent - calling it multiple times has no effect.
        """
        with self._lock:
            if self._state == ContextState.CLOSED:
                return
            if self._bean_factory is not None:
                self._bean_factory.destroy_singletons()
            self._state = ContextState.CLOSED
            if self._shutdown_hook_registered:
                atexit.unregister(self.close)
                self._shutdown_hook_registered = False
            logger.info("ApplicationContext closed")

    def register_shutdown_hook(self) -> None:
        """Close this context automatically when the interpreter exits."""
        with self._lock:
            self._ensure_not_closed()
            if not self._shutdown_hook_registered:
                atexit.register(self.close)
                self._shutdown_hook_registered = True

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_bean(
        self,
        name: str,
        required_type: Optional[Type[T]] = None,
        args: Optional[Sequence[Any]] = None,
    ) -> T:
        """Get a bean by name.

        Args:
            name: Bean name, ``&``-prefixed for a FactoryBean itself
            required_type: Expected type of the bean (optional)
            args: Explicit constructor arguments for a new instance (optional)

        Raises:
            NotInitializedError: Before the first refresh
            ContainerClosedError: After close
            NotFoundError: If no bean has that name
            BeanTypeMismatchError: If the bean is not a ``required_type``

        Example::

            service = context.get_bean("userService")
            dao = context.get_bean("userDao", UserDao)
        """
        return self._ensure_usable().get_bean(name, required_type, args)

    def get_beans_of_type(self, bean_type: Type[T]) -> Dict[str, T]:
        return self._ensure_usable().get_beans_of_type(bean_type)

    def contains_bean(self, name: str) -> bool:
        return self._ensure_usable().contains_bean(name)

    def get_bean_definition_names(self) -> List[str]:
        return self._ensure_usable().bean_definition_names()

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> 'ApplicationContext':
        """Enter context manager.

        Returns:
            The ApplicationContext instance itself
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Exit context manager and close the context.

        Returns:
            False (exceptions are not suppressed)
        """
        self.close()
        return False

    def __repr__(self) -> str:
        return f"<ApplicationContext state={self._state.value}>"
