"""
Test Configuration and Utilities

Common base classes and helper functions for beanery tests
"""

import unittest
from typing import Any, List, Optional, Tuple, Type

from beanery import ApplicationContext, BeanModule, ContainerConfig


class BeaneryTestCase(unittest.TestCase):
    """
    Base test case class for beanery tests.

    Keeps track of the contexts created through ``create_context`` and
    closes them after each test.
    """

    def setUp(self):
        self._contexts: List[ApplicationContext] = []

    def tearDown(self):
        for context in self._contexts:
            context.close()

    def create_context(self, *modules: BeanModule, **config: Any) -> ApplicationContext:
        """Create and refresh a context closed automatically in tearDown."""
        context = ApplicationContext(
            modules=list(modules) or None,
            config=ContainerConfig(**config),
        )
        self._contexts.append(context)
        return context


def create_simple_module(*bean_classes: Type) -> BeanModule:
    """
    Create a simple module with singleton registrations for the given classes.

    Each class is registered under its default name and must have a
    no-argument constructor.

    Example:
        >>> module = create_simple_module(Database, CacheService)
        >>> context = ApplicationContext(modules=[module])
        >>> context.get_bean("database")
    """
    module = BeanModule()
    with module:
        for cls in bean_classes:
            module.single[cls]()
    return module


def create_module_with_properties(
    registrations: List[Tuple[str, Type, Optional[dict]]]
) -> BeanModule:
    """
    Create a module of singletons wired through properties.

    Args:
        registrations: List of tuples (name, bean_type, properties)

    Example:
        >>> module = create_module_with_properties([
        ...     ("dao", UserDao, None),
        ...     ("service", UserService, {"dao": ref("dao")}),
        ... ])
    """
    module = BeanModule()
    with module:
        for name, bean_type, properties in registrations:
            module.single[bean_type](name, properties=properties)
    return module
