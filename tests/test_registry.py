"""
Registry Tests

Tests for BeanDefinitionRegistry
"""

import unittest

from beanery import BeanDefinition, BeanDefinitionRegistry, PropertyAssignment, ref
from beanery.exceptions import NotFoundError


class Database:
    pass


class CacheService:
    pass


class TestBeanDefinitionRegistry(unittest.TestCase):
    """Insert-or-overwrite registry behavior"""

    def setUp(self):
        self.registry = BeanDefinitionRegistry()

    def test_register_and_lookup(self):
        definition = BeanDefinition("database", Database)

        self.registry.register(definition)

        self.assertIs(self.registry.lookup("database"), definition)
        self.assertTrue(self.registry.contains("database"))
        self.assertIn("database", self.registry)
        self.assertEqual(len(self.registry), 1)

    def test_lookup_unknown_name_raises_not_found(self):
        self.registry.register(BeanDefinition("database", Database))

        with self.assertRaises(NotFoundError) as ctx:
            self.registry.lookup("cache")

        self.assertEqual(ctx.exception.bean_name, "cache")
        self.assertIn("'cache'", str(ctx.exception))
        self.assertIn("database", str(ctx.exception))

    def test_reregister_overwrites_and_keeps_position(self):
        self.registry.register(BeanDefinition("database", Database))
        self.registry.register(BeanDefinition("cache", CacheService))

        replacement = BeanDefinition("database", CacheService)
        self.registry.register(replacement)

        self.assertIs(self.registry.lookup("database"), replacement)
        self.assertEqual(self.registry.names(), ["database", "cache"])

    def test_register_bean_definition_renames_copy(self):
        definition = BeanDefinition("database", Database)

        self.registry.register_bean_definition("primaryDb", definition)

        self.assertEqual(self.registry.lookup("primaryDb").name, "primaryDb")
        self.assertEqual(definition.name, "database")
        self.assertFalse(self.registry.contains("database"))

    def test_empty_name_rejected(self):
        with self.assertRaises(ValueError):
            self.registry.register(BeanDefinition("", Database))

    def test_references_are_not_validated(self):
        definition = BeanDefinition(
            "service", Database,
            properties=[PropertyAssignment("dao", ref("notYetRegistered"))],
        )

        self.registry.register(definition)

        self.assertTrue(self.registry.contains("service"))

    def test_remove(self):
        self.registry.register(BeanDefinition("database", Database))

        removed = self.registry.remove("database")

        self.assertEqual(removed.name, "database")
        self.assertEqual(len(self.registry), 0)
        with self.assertRaises(NotFoundError):
            self.registry.remove("database")

    def test_iteration_follows_registration_order(self):
        for name in ("c", "a", "b"):
            self.registry.register(BeanDefinition(name, Database))

        self.assertEqual([d.name for d in self.registry], ["c", "a", "b"])

    def test_revision_changes_on_register_and_remove(self):
        start = self.registry.revision

        self.registry.register(BeanDefinition("database", Database))
        after_register = self.registry.revision
        self.registry.remove("database")

        self.assertGreater(after_register, start)
        self.assertGreater(self.registry.revision, after_register)


if __name__ == '__main__':
    unittest.main()
