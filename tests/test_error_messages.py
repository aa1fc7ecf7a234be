"""
Error Messages Tests

Tests for error message quality and exception hierarchy.
Verifies that error messages are helpful and contain sufficient context.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from beanery import BeanDefinition, BeanFactory, BeanModule, ApplicationContext, ref
from beanery.exceptions import (
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
from fixtures import CtorA, CtorB, Database, UserService


class TestExceptionHierarchy(unittest.TestCase):
    """All exceptions inherit from BeansError"""

    def test_every_error_is_a_beans_error(self):
        errors = [
            NotFoundError("x"),
            BeanTypeMismatchError("x", int, str),
            BeanCreationError("x", int, "failed"),
            InstantiationError("x", int, "failed"),
            PropertyAssignmentError("x", int, "failed"),
            CircularDependencyError("x"),
            CircularConstructorDependencyError("x"),
            BeanDestructionError("x", OSError()),
            DefinitionFrozenError("x"),
            AopConfigError("x"),
            NotInitializedError("x"),
            ContainerClosedError("x"),
        ]

        for error in errors:
            with self.subTest(error=type(error).__name__):
                self.assertIsInstance(error, BeansError)
                self.assertIsInstance(error, Exception)

    def test_creation_error_subclasses(self):
        self.assertTrue(issubclass(InstantiationError, BeanCreationError))
        self.assertTrue(issubclass(PropertyAssignmentError, BeanCreationError))
        self.assertTrue(issubclass(CircularConstructorDependencyError, CircularDependencyError))


class TestErrorMessages(unittest.TestCase):
    """Messages carry the context needed to fix the problem"""

    def test_not_found_lists_registered_beans(self):
        context = ApplicationContext(modules=[self._module()])

        with self.assertRaises(NotFoundError) as ctx:
            context.get_bean("userDao")

        message = str(ctx.exception)
        self.assertIn("'userDao'", message)
        self.assertIn("database", message)
        context.close()

    def test_creation_error_names_bean_and_type(self):
        error = BeanCreationError("userService", UserService, "init method failed")

        self.assertEqual(
            str(error),
            "Error creating bean 'userService' (UserService): init method failed",
        )

    def test_type_mismatch_names_both_types(self):
        error = BeanTypeMismatchError("database", UserService, Database)

        self.assertIn("UserService", str(error))
        self.assertIn("Database", str(error))

    def test_constructor_cycle_message(self):
        factory = BeanFactory()
        factory.register_bean_definition(BeanDefinition("a", CtorA, constructor_args=[ref("b")]))
        factory.register_bean_definition(BeanDefinition("b", CtorB, constructor_args=[ref("a")]))

        with self.assertRaises(CircularConstructorDependencyError) as ctx:
            factory.get_bean("b")

        self.assertIn("b -> a -> b", str(ctx.exception))
        self.assertEqual(ctx.exception.chain, ["b", "a", "b"])

    def test_nested_errors_pass_through_unwrapped(self):
        factory = BeanFactory()
        factory.register_bean_definition(BeanDefinition("a", CtorA, constructor_args=[ref("missing")]))

        with self.assertRaises(NotFoundError) as ctx:
            factory.get_bean("a")

        self.assertEqual(ctx.exception.bean_name, "missing")

    def test_destruction_error_keeps_cause(self):
        cause = OSError("disk gone")
        error = BeanDestructionError("database", cause)

        self.assertIs(error.cause, cause)
        self.assertIn("database", str(error))

    def test_closed_context_message(self):
        context = ApplicationContext(modules=[self._module()])
        context.close()

        with self.assertRaises(ContainerClosedError) as ctx:
            context.get_bean("database")

        self.assertIn("closed", str(ctx.exception))

    @staticmethod
    def _module():
        module = BeanModule()
        with module:
            module.single[Database]()
        return module


if __name__ == '__main__':
    unittest.main()
