"""
BeanFactory

This module provides the construction and injection engine of beanery.
It is the heart of the container, responsible for:

- Storing bean definitions (through a BeanDefinitionRegistry)
- Instantiating beans and injecting their properties
- Resolving field/setter cycles between singletons by early exposure
- Detecting unresolvable constructor cycles
- Running awareness injection, init methods and post-processors
- Caching singletons and destroying them on close

The factory is typically not used directly. Instead, use ApplicationContext,
which drives it through the refresh/close lifecycle.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar, get_type_hints

from .aware import invoke_aware_methods
from .config import ContainerConfig
from .definition import BeanDefinition, BeanReference
from .exceptions import (
    BeanCreationError,
    BeanDestructionError,
    BeansError,
    BeanTypeMismatchError,
    CircularConstructorDependencyError,
    CircularDependencyError,
    PropertyAssignmentError,
)
from .factory_bean import (
    FACTORY_BEAN_PREFIX,
    FactoryBean,
    FactoryBeanObjectCache,
    is_factory_dereference,
    transformed_bean_name,
)
from .instantiation import InstantiationStrategy, SimpleInstantiationStrategy
from .processors import BeanPostProcessor, DisposableBean, InitializingBean, PostProcessorPipeline
from .registry import BeanDefinitionRegistry
from .resolution_context import ResolutionContext, _resolution_context
from .singleton_cache import SingletonCache

T = TypeVar('T')

logger = logging.getLogger(__name__)


class DisposableBeanAdapter:
    """Destroy callback for a singleton.

    Calls ``destroy()`` when the bean is a DisposableBean, then the
    definition's ``destroy_method`` if it names a different method.
    """

    def __init__(self, bean: Any, destroy_method: Optional[str]):
        self.bean = bean
        self.destroy_method = destroy_method

    def __call__(self) -> None:
        is_disposable = isinstance(self.bean, DisposableBean)
        if is_disposable:
            self.bean.destroy()
        if self.destroy_method and not (is_disposable and self.destroy_method == "destroy"):
            getattr(self.bean, self.destroy_method)()


class BeanFactory:
    """Construction and injection engine.

    Builds beans in this order: instantiate, expose early (singletons),
    populate properties, inject awareness, before-initialization hooks,
    init methods, after-initialization hooks, cache (singletons).

    First-time singleton construction is serialized by one re-entrant lock.
    Fully initialized singletons are read without locking.

    Attributes:
        config: Container settings
        registry: Bean definitions, keyed by name
        singleton_cache: Singleton instances and their construction state

    Example::

        factory = BeanFactory()
        factory.register_bean_definition(BeanDefinition("dao", UserDao))
        factory.register_bean_definition(BeanDefinition(
            "service", UserService,
            properties=[PropertyAssignment("dao", BeanReference("dao"))],
        ))
        service = factory.get_bean("service")
    """

    def __init__(
        self,
        config: Optional[ContainerConfig] = None,
        instantiation_strategy: Optional[InstantiationStrategy] = None,
    ):
        self.config: ContainerConfig = config or ContainerConfig()
        self.registry = BeanDefinitionRegistry()
        self.singleton_cache = SingletonCache()
        self._factory_bean_cache = FactoryBeanObjectCache()
        self._post_processors = PostProcessorPipeline()
        self._instantiation_strategy = instantiation_strategy or SimpleInstantiationStrategy()
        self._creation_lock = threading.RLock()

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def register_bean_definition(self, definition: BeanDefinition) -> None:
        """Register a definition, overriding any previous one with the same name.

        A singleton already built from the previous definition is destroyed
        and evicted, so the next lookup builds from the new definition.
        """
        name = definition.name
        with self._creation_lock:
            if self.registry.contains(name):
                logger.debug("Overriding bean definition '%s'", name)
                self._factory_bean_cache.remove(name)
                error = self.singleton_cache.destroy_one(name)
                if error is not None:
                    logger.warning("Previous instance of '%s' failed to destroy: %s", name, error)
            self.registry.register(definition)

    def get_bean_definition(self, name: str) -> BeanDefinition:
        return self.registry.lookup(name)

    def contains_bean_definition(self, name: str) -> bool:
        return self.registry.contains(name)

    def bean_definition_names(self) -> List[str]:
        return self.registry.names()

    def contains_bean(self, name: str) -> bool:
        bean_name = transformed_bean_name(name)
        return self.registry.contains(bean_name) or self.singleton_cache.get_initialized(bean_name) is not None

    # ------------------------------------------------------------------
    # Post-processors
    # ------------------------------------------------------------------

    def add_bean_post_processor(self, processor: BeanPostProcessor) -> None:
        self._post_processors.add(processor)

    @property
    def bean_post_processors(self) -> List[BeanPostProcessor]:
        return self._post_processors.processors

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_bean(
        self,
        name: str,
        required_type: Optional[Type[T]] = None,
        args: Optional[Sequence[Any]] = None,
    ) -> T:
        """Return the bean registered as ``name``, building it if needed.

        Args:
            name: Bean name. Prefix with ``&`` to get a FactoryBean itself
                rather than its product.
            required_type: When given, the bean must be an instance of it
            args: Explicit constructor arguments, overriding the definition's.
                Ignored for singletons that already exist.

        Returns:
            The bean instance

        Raises:
            NotFoundError: When ``name`` is not registered
            BeanTypeMismatchError: When the bean is not a ``required_type``
            BeanCreationError: When construction fails
            CircularConstructorDependencyError: On a constructor cycle
        """
        bean_name = transformed_bean_name(name)
        instance = self.singleton_cache.get_initialized(bean_name) if args is None else None

        if instance is None:
            definition = self.registry.lookup(bean_name)
            if definition.is_singleton:
                instance = self._get_or_create_singleton(bean_name, definition, args)
            else:
                instance = self.create_bean(bean_name, definition, args)

        bean = self._get_object_for_bean_instance(instance, name, bean_name)

        if required_type is not None and not isinstance(bean, required_type):
            raise BeanTypeMismatchError(name, required_type, bean.__class__)
        return bean

    def get_beans_of_type(self, bean_type: Type[T]) -> Dict[str, T]:
        """Return every bean whose definition produces a ``bean_type``.

        Matching beans are built on demand. Order follows registration.
        FactoryBean definitions match on their ``object_type``.

        Returns:
            Mapping of bean name to bean, empty when nothing matches
        """
        result: Dict[str, T] = {}
        for definition in self.registry.definitions():
            lookup_name = self._lookup_name_for_type(definition, bean_type)
            if lookup_name is not None:
                result[definition.name] = self.get_bean(lookup_name)
        return result

    def get_bean_names_for_type(self, bean_type: Type) -> List[str]:
        return [
            definition.name for definition in self.registry.definitions()
            if self._lookup_name_for_type(definition, bean_type) is not None
        ]

    def pre_instantiate_singletons(self) -> None:
        """Build every singleton that is not lazy, in registration order.

        FactoryBeans are built but their products are not requested.
        """
        for definition in self.registry.definitions():
            if definition.is_singleton and not self._is_lazy(definition):
                if self.singleton_cache.get_initialized(definition.name) is None:
                    self._get_or_create_singleton(definition.name, definition, None)

    def destroy_singletons(self) -> List[BeanDestructionError]:
        """Destroy all singletons. Failures are logged and returned, never raised."""
        with self._creation_lock:
            errors = self.singleton_cache.destroy_all()
            self._factory_bean_cache.clear()
        return errors

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _get_or_create_singleton(
        self,
        name: str,
        definition: BeanDefinition,
        args: Optional[Sequence[Any]],
    ) -> Any:
        with self._creation_lock:
            # Only the thread holding the lock can see an early-exposed instance
            instance = self.singleton_cache.get_singleton(name)
            if instance is not None:
                return instance
            return self.create_bean(name, definition, args)

    def create_bean(
        self,
        name: str,
        definition: BeanDefinition,
        args: Optional[Sequence[Any]] = None,
    ) -> Any:
        """Build a bean from its definition.

        Joins the construction run active on this thread, or starts a new
        one. A name re-entered while still in progress is a cycle that early
        exposure could not break.

        Args:
            name: Bean name
            definition: The definition to build from
            args: Explicit constructor arguments

        Returns:
            The fully initialized, possibly proxied, bean
        """
        ctx = _resolution_context.get()
        token = None
        if ctx is None:
            ctx = ResolutionContext()
            token = _resolution_context.set(ctx)

        try:
            if ctx.is_in_progress(name):
                raise self._cycle_error(name, definition, ctx)

            ctx.enter(name)
            try:
                return self._do_create_bean(name, definition, args, ctx)
            finally:
                ctx.leave(name)
        finally:
            if token is not None:
                _resolution_context.reset(token)

    def _do_create_bean(
        self,
        name: str,
        definition: BeanDefinition,
        args: Optional[Sequence[Any]],
        ctx: ResolutionContext,
    ) -> Any:
        definition.freeze()
        logger.debug("Creating %s bean '%s'", definition.scope.value, name)

        resolved_args = self._resolve_constructor_args(definition, args)
        factory_bean = self._resolve_factory_bean(definition)
        raw = self._instantiation_strategy.instantiate(definition, resolved_args, factory_bean)

        exposed_early = definition.is_singleton and self.config.allow_circular_references
        if exposed_early:
            self.singleton_cache.expose_early(name, raw)
        mark = ctx.mark()

        try:
            self._populate_properties(name, definition, raw)
            initialized, exposed = self._initialize_bean(name, definition, raw)
        except Exception:
            if definition.is_singleton:
                self.singleton_cache.discard(name)
            if exposed_early:
                self._discard_completed_dependents(name, ctx.completed_since(mark))
            raise

        if definition.is_singleton:
            self.singleton_cache.finalize(name, exposed)
            self._register_disposable_if_necessary(name, definition, initialized)
            ctx.record_completed(name)
        return exposed

    def _discard_completed_dependents(self, failed: str, names: List[str]) -> None:
        """Destroy singletons completed while ``failed`` was exposed early.

        Any of them may hold the early reference to the failed bean, so they
        are evicted and rebuilt on their next lookup.
        """
        for dependent in reversed(names):
            logger.debug("Discarding '%s', completed during failed construction of '%s'", dependent, failed)
            self._factory_bean_cache.remove(dependent)
            error = self.singleton_cache.destroy_one(dependent)
            if error is not None:
                logger.warning("Discarded bean '%s' failed to destroy: %s", dependent, error)

    def _cycle_error(self, name: str, definition: BeanDefinition, ctx: ResolutionContext) -> BeansError:
        chain = ctx.cycle(name)
        cycle = " -> ".join(chain)
        if definition.is_prototype:
            return CircularDependencyError(
                f"Circular reference between prototype beans: {cycle}", chain
            )
        if not self.config.allow_circular_references:
            return CircularDependencyError(
                f"Circular reference detected and circular references are disabled: {cycle}",
                chain,
            )
        return CircularConstructorDependencyError(
            f"Unresolvable circular constructor dependency: {cycle}. "
            f"Bean '{name}' is requested before it could be instantiated.",
            chain,
        )

    def _resolve_value(self, value: Any) -> Any:
        if isinstance(value, BeanReference):
            return self.get_bean(value.bean_name)
        return value

    def _resolve_constructor_args(
        self,
        definition: BeanDefinition,
        args: Optional[Sequence[Any]],
    ) -> List[Any]:
        values = definition.constructor_args if args is None else args
        return [self._resolve_value(value) for value in values]

    def _resolve_factory_bean(self, definition: BeanDefinition) -> Optional[Any]:
        factory_method = definition.factory_method
        if factory_method is None or factory_method.factory_bean_name is None:
            return None
        return self.get_bean(factory_method.factory_bean_name)

    def _populate_properties(self, name: str, definition: BeanDefinition, bean: Any) -> None:
        if not definition.properties:
            return
        hints = self._field_type_hints(type(bean))
        for assignment in definition.properties:
            value = self._resolve_value(assignment.value)
            self._assign_property(name, definition, bean, assignment.name, value, hints)

    @staticmethod
    def _field_type_hints(cls: type) -> Dict[str, Any]:
        try:
            return get_type_hints(cls)
        except Exception as exc:
            logger.warning("Cannot resolve type hints of %s: %s", cls.__qualname__, exc)
            return {}

    def _assign_property(
        self,
        bean_name: str,
        definition: BeanDefinition,
        bean: Any,
        field: str,
        value: Any,
        hints: Dict[str, Any],
    ) -> None:
        if field not in hints and not hasattr(bean, field):
            raise PropertyAssignmentError(
                bean_name,
                definition.bean_type,
                f"{type(bean).__name__} has no field '{field}'",
            )

        expected = hints.get(field)
        if not _is_compatible(value, expected):
            raise PropertyAssignmentError(
                bean_name,
                definition.bean_type,
                f"field '{field}' expects {expected.__name__}, got {type(value).__name__}",
            )

        try:
            setattr(bean, field, value)
        except Exception as e:
            raise PropertyAssignmentError(
                bean_name,
                definition.bean_type,
                f"cannot set field '{field}': {e}",
            ) from e

    def _initialize_bean(self, name: str, definition: BeanDefinition, bean: Any) -> Tuple[Any, Any]:
        """Run awareness, hooks and init methods.

        Returns:
            The bean before after-initialization hooks (the destroy target)
            and the bean to expose
        """
        invoke_aware_methods(bean, name, self, self.config.environment)

        wrapped = self._post_processors.apply_before_initialization(bean, name)
        self._invoke_init_methods(name, definition, wrapped)
        exposed = self._post_processors.apply_after_initialization(wrapped, name)
        return wrapped, exposed

    @staticmethod
    def _invoke_init_methods(name: str, definition: BeanDefinition, bean: Any) -> None:
        init_method = definition.init_method
        is_initializing = isinstance(bean, InitializingBean)
        try:
            if is_initializing:
                bean.after_properties_set()
            if init_method and not (is_initializing and init_method == "after_properties_set"):
                method = getattr(bean, init_method, None)
                if method is None:
                    raise BeanCreationError(
                        name, definition.bean_type, f"init method '{init_method}' not found"
                    )
                method()
        except BeansError:
            raise
        except Exception as e:
            raise BeanCreationError(
                name, definition.bean_type, f"init method failed: {e}"
            ) from e

    def _register_disposable_if_necessary(self, name: str, definition: BeanDefinition, bean: Any) -> None:
        if isinstance(bean, DisposableBean) or definition.destroy_method:
            self.singleton_cache.register_disposable(
                name, DisposableBeanAdapter(bean, definition.destroy_method)
            )

    # ------------------------------------------------------------------
    # FactoryBean support
    # ------------------------------------------------------------------

    def _get_object_for_bean_instance(self, instance: Any, requested_name: str, bean_name: str) -> Any:
        if is_factory_dereference(requested_name):
            if not isinstance(instance, FactoryBean):
                raise BeanTypeMismatchError(bean_name, FactoryBean, instance.__class__)
            return instance

        if not isinstance(instance, FactoryBean):
            return instance

        definition = self.registry.lookup(bean_name)
        if definition.is_singleton and instance.is_singleton():
            with self._creation_lock:
                if self._factory_bean_cache.contains(bean_name):
                    return self._factory_bean_cache.get(bean_name)
                product = self._get_object_from_factory_bean(instance, bean_name, definition)
                self._factory_bean_cache.put(bean_name, product)
                return product
        return self._get_object_from_factory_bean(instance, bean_name, definition)

    def _get_object_from_factory_bean(self, factory: FactoryBean, bean_name: str, definition: BeanDefinition) -> Any:
        try:
            product = factory.get_object()
        except BeansError:
            raise
        except Exception as e:
            raise BeanCreationError(
                bean_name, definition.bean_type, f"FactoryBean raised {type(e).__name__}: {e}"
            ) from e
        if product is None:
            return None
        return self._post_processors.apply_after_initialization(product, bean_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _is_lazy(self, definition: BeanDefinition) -> bool:
        if definition.lazy_init is None:
            return self.config.default_lazy_init
        return definition.lazy_init

    @staticmethod
    def _lookup_name_for_type(definition: BeanDefinition, bean_type: Type) -> Optional[str]:
        """Name to look a matching bean up by, or None when it does not match.

        A FactoryBean definition matches through its product type first,
        then as the factory itself (looked up with the ``&`` prefix).
        """
        candidate = definition.bean_type
        if not isinstance(candidate, type):
            return None
        if issubclass(candidate, FactoryBean):
            object_type = candidate.object_type
            if object_type is not None and issubclass(object_type, bean_type):
                return definition.name
            if issubclass(candidate, bean_type):
                return FACTORY_BEAN_PREFIX + definition.name
            return None
        return definition.name if issubclass(candidate, bean_type) else None

    def __repr__(self) -> str:
        return (
            f"<BeanFactory definitions={len(self.registry)} "
            f"singletons={len(self.singleton_cache.names())}>"
        )


def _is_compatible(value: Any, expected: Any) -> bool:
    """Check ``value`` against a plain-class type hint.

    Generic aliases, unions and other typing constructs are not checked.
    """
    if value is None or not isinstance(expected, type):
        return True
    if isinstance(value, expected):
        return True
    # Numeric tower: an int is acceptable where a float or complex is expected
    if expected in (float, complex) and isinstance(value, (int, float)) and not isinstance(value, bool):
        return True
    return False


__all__ = ["BeanFactory", "DisposableBeanAdapter", "FACTORY_BEAN_PREFIX"]
