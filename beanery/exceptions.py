"""
Beanery Exceptions

Custom exception hierarchy for the beanery IoC container
"""

from typing import Optional, Sequence, Type


class BeansError(Exception):
    """
    Base exception for all beanery errors.

    All container-specific exceptions inherit from this class.
    You can catch this to handle any container error generically.

    Example:
        >>> try:
        ...     service = context.get_bean("userService")
        ... except BeansError as e:
        ...     print(f"Container error: {e}")
    """

    pass


class NotFoundError(BeansError):
    """
    Raised when a requested bean name is not registered.

    This error surfaces directly to the caller and is never retried.

    Common causes:
        - Typo in the bean name or in a ``ref("...")`` value
        - The module declaring the bean was not passed to the context
        - The definition was removed from the registry

    Solution:
        Register the bean before resolving it::

            module = BeanModule()
            with module:
                module.single[UserDao]("userDao")

            context = ApplicationContext(modules=[module])
            dao = context.get_bean("userDao")

    Note:
        The error message includes the registered bean names
        to help identify available beans.
    """

    def __init__(self, message: str, bean_name: Optional[str] = None):
        super().__init__(message)
        self.bean_name = bean_name


class BeanTypeMismatchError(BeansError):
    """
    Raised when a bean exists but is not of the required type.

    Example::

        context.get_bean("userDao", UserService)  # BeanTypeMismatchError
    """

    def __init__(self, bean_name: str, required_type: Type, actual_type: Type):
        super().__init__(
            f"Bean '{bean_name}' is expected to be of type "
            f"{required_type.__name__} but was {actual_type.__name__}"
        )
        self.bean_name = bean_name
        self.required_type = required_type
        self.actual_type = actual_type


class BeanCreationError(BeansError):
    """
    Raised when a bean cannot be created.

    Carries the bean name and bean type so the failing definition can be
    identified. The underlying failure is chained as ``__cause__``.

    Subclasses distinguish the construction phase that failed:
    ``InstantiationError`` and ``PropertyAssignmentError``. The base class
    itself is raised for init method and FactoryBean failures.
    """

    def __init__(self, bean_name: str, bean_type: Optional[Type], message: str):
        type_name = bean_type.__name__ if bean_type is not None else "?"
        super().__init__(f"Error creating bean '{bean_name}' ({type_name}): {message}")
        self.bean_name = bean_name
        self.bean_type = bean_type


class InstantiationError(BeanCreationError):
    """
    Raised when a bean's raw instance cannot be created.

    Common causes:
        - No constructor (or factory method) accepts the supplied arguments
        - The constructor itself raised an exception
        - The factory method named by the definition does not exist

    Solution:
        Make ``constructor_args`` match the ``__init__`` signature::

            class Job:
                def __init__(self, dao, retries): ...

            module.prototype[Job]("job", constructor_args=[ref("userDao"), 3])
    """

    pass


class PropertyAssignmentError(BeanCreationError):
    """
    Raised when a declared property cannot be assigned.

    Common causes:
        - The target field does not exist on the bean
        - The value is incompatible with the field's type hint
        - The field is a read-only property

    Solution:
        Declare the field on the class, either with a type hint or by
        initializing it in ``__init__``::

            class UserService:
                dao: UserDao

                def __init__(self):
                    self.dao = None
    """

    pass


class CircularDependencyError(BeansError):
    """
    Raised when a bean is re-entered while it is still being constructed
    and no partially-built instance can be handed back.

    This happens for prototype cycles, and for any cycle when the container
    is configured with ``allow_circular_references=False``.

    Example of a prototype cycle::

        module.prototype[A]("a", properties={"b": ref("b")})
        module.prototype[B]("b", properties={"a": ref("a")})  # Circular!
    """

    def __init__(self, message: str, chain: Sequence[str] = ()):
        super().__init__(message)
        self.chain = list(chain)


class CircularConstructorDependencyError(CircularDependencyError):
    """
    Raised when singletons form a cycle purely through constructor arguments.

    Field and setter cycles between singletons are resolved by early
    exposure. A constructor cycle cannot be: the bean being re-entered has
    not been instantiated yet, so there is no partial instance to return.

    Example::

        module.single[A]("a", constructor_args=[ref("b")])
        module.single[B]("b", constructor_args=[ref("a")])  # fatal

    Solution:
        Break the cycle by turning one of the constructor arguments into a
        property::

            module.single[A]("a", constructor_args=[ref("b")])
            module.single[B]("b", properties={"a": ref("a")})
    """

    pass


class BeanDestructionError(BeansError):
    """
    Wraps a failure raised by a bean's destroy callback.

    Teardown is best-effort: these errors are logged and collected by
    ``SingletonCache.destroy_all()`` rather than raised.
    """

    def __init__(self, bean_name: str, cause: BaseException):
        super().__init__(f"Failed to destroy bean '{bean_name}': {cause}")
        self.bean_name = bean_name
        self.cause = cause


class DefinitionFrozenError(BeansError):
    """
    Raised when a bean definition is mutated after construction for its
    name has started.

    BeanFactoryPostProcessors run before any singleton is built and may
    still change definitions at that point.
    """

    pass


class AopConfigError(BeansError):
    """
    Raised when the AOP machinery is misconfigured.

    Common causes:
        - Building a MethodInvocation with no interceptors
        - A malformed pointcut expression
        - An advice method that does not exist on its aspect bean
    """

    pass


class NotInitializedError(BeansError):
    """
    Raised when an ApplicationContext is used before ``refresh()``.

    Solution:
        Pass modules to the constructor, or call ``refresh()`` first::

            context = ApplicationContext()
            context.load_modules([module])
            context.refresh()
            service = context.get_bean("userService")
    """

    pass


class ContainerClosedError(BeansError):
    """
    Raised when attempting to use a closed container.

    A closed ApplicationContext is terminal: its singletons have been
    destroyed and it rejects every further ``get_bean`` call.

    Solution:
        Create a new ``ApplicationContext`` instead of reusing a closed one::

            with ApplicationContext(modules=[module]) as context:
                service = context.get_bean("userService")  # OK
            # Context is now closed

            context2 = ApplicationContext(modules=[module])
    """

    pass
