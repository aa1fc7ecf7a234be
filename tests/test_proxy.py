"""
AopProxy Tests

Tests for the dynamic proxy and chain building
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from beanery import AdviceKind, Advisor, AopProxy, InitializingBean, Pointcut, get_proxy_target, is_aop_proxy
from beanery.interceptor import BeforeInterceptor
from beanery.proxy import build_chains, candidate_methods, create_proxy, proxy_class_for
from fixtures import Calculator, LifecycleBean


class TestAopProxy(unittest.TestCase):
    """Forwarding and interception"""

    def setUp(self):
        self.target = Calculator()
        self.events = []
        self.proxy = AopProxy(self.target, {
            "add": [BeforeInterceptor(lambda jp: self.events.append(jp.args))],
        })

    def test_isinstance_reports_target_class(self):
        self.assertIsInstance(self.proxy, Calculator)
        self.assertIs(self.proxy.__class__, Calculator)
        self.assertIs(type(self.proxy), AopProxy)

    def test_capability_tags_hold(self):
        proxy = AopProxy(LifecycleBean(), {})

        self.assertIsInstance(proxy, InitializingBean)

    def test_advised_method_is_intercepted_per_call(self):
        self.assertEqual(self.proxy.add(1, 2), 3)
        self.assertEqual(self.proxy.add(3, 4), 7)

        self.assertEqual(self.events, [(1, 2), (3, 4)])
        self.assertEqual(self.target.calls, 2)

    def test_wrapper_keeps_method_name(self):
        self.assertEqual(self.proxy.add.__name__, "add")

    def test_unadvised_method_passes_through(self):
        self.assertEqual(self.proxy.describe(), "calculator")
        self.assertEqual(self.proxy.describe, self.target.describe)
        self.assertEqual(self.events, [])

    def test_attribute_reads_and_writes_reach_target(self):
        self.proxy.calls = 10
        self.proxy.label = "main"

        self.assertEqual(self.target.calls, 10)
        self.assertEqual(self.target.label, "main")
        self.assertEqual(self.proxy.label, "main")

        del self.proxy.label
        self.assertFalse(hasattr(self.target, "label"))

    def test_missing_attribute_raises_attribute_error(self):
        with self.assertRaises(AttributeError):
            self.proxy.missing

    def test_helpers(self):
        self.assertTrue(is_aop_proxy(self.proxy))
        self.assertFalse(is_aop_proxy(self.target))
        self.assertIs(get_proxy_target(self.proxy), self.target)
        self.assertIs(get_proxy_target(self.target), self.target)


class TestBuildChains(unittest.TestCase):
    """Per-method interceptor chains"""

    def test_candidate_methods_are_public_routines(self):
        self.assertEqual(candidate_methods(Calculator), ["add", "describe", "fail"])

    def test_only_matched_methods_get_chains(self):
        advisors = [
            Advisor(None, AdviceKind.BEFORE, print, Pointcut.parse("Calculator.add")),
            Advisor(None, AdviceKind.AROUND, print, Pointcut.parse("Calculator.*")),
        ]

        chains = build_chains(Calculator, advisors, lambda advisor: advisor.advice)

        self.assertEqual(sorted(chains), ["add", "describe", "fail"])
        self.assertEqual(len(chains["add"]), 2)
        self.assertEqual(len(chains["describe"]), 1)

    def test_interceptor_shared_across_methods(self):
        advisors = [Advisor(None, AdviceKind.AROUND, print, Pointcut.parse("Calculator.*"))]

        chains = build_chains(Calculator, advisors, lambda advisor: advisor.advice)

        self.assertIs(chains["add"][0], chains["fail"][0])

    def test_proxy_without_matching_method(self):
        advisors = [Advisor(None, AdviceKind.BEFORE, print, Pointcut.parse("Calculator.nothing"))]

        proxy = create_proxy(Calculator(), advisors, lambda advisor: advisor.advice)

        self.assertTrue(is_aop_proxy(proxy))
        self.assertEqual(proxy.add(1, 1), 2)


class Resource:
    """Container-like bean implementing several protocols"""

    def __init__(self):
        self.items = ["a", "b"]
        self.opened = False

    def read(self):
        return list(self.items)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __contains__(self, item):
        return item in self.items

    def __getitem__(self, index):
        return self.items[index]

    def __call__(self, suffix):
        return [item + suffix for item in self.items]

    def __enter__(self):
        self.opened = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.opened = False
        return False


class Token:
    """Value-like bean with equality and hashing"""

    def __init__(self, value="t"):
        self.value = value

    def get(self):
        return self.value

    def __eq__(self, other):
        return isinstance(other, Token) and other.value == self.value

    def __hash__(self):
        return hash(self.value)


class Unhashable:
    def get(self):
        return 1

    def __eq__(self, other):
        return other is self


class TestDunderForwarding(unittest.TestCase):
    """Protocols of the target keep working through create_proxy"""

    def setUp(self):
        self.events = []
        self.resolve = lambda advisor: advisor.advice

    def _proxy(self, target, expression):
        advisor = Advisor(None, AdviceKind.BEFORE, lambda jp: self.events.append(jp.method_name),
                          Pointcut.parse(expression))
        return create_proxy(target, [advisor], self.resolve)

    def test_container_protocols(self):
        proxy = self._proxy(Resource(), "Resource.read")

        self.assertEqual(len(proxy), 2)
        self.assertEqual(list(proxy), ["a", "b"])
        self.assertIn("a", proxy)
        self.assertEqual(proxy[1], "b")
        self.assertTrue(bool(proxy))

    def test_call_and_context_manager(self):
        target = Resource()
        proxy = self._proxy(target, "Resource.read")

        self.assertEqual(proxy("!"), ["a!", "b!"])
        with proxy as entered:
            self.assertTrue(target.opened)
            self.assertIs(entered, target)
        self.assertFalse(target.opened)

    def test_advised_method_still_intercepted(self):
        proxy = self._proxy(Resource(), "Resource.read")

        self.assertEqual(proxy.read(), ["a", "b"])
        self.assertEqual(self.events, ["read"])
        self.assertIsInstance(proxy, Resource)
        self.assertTrue(is_aop_proxy(proxy))
        self.assertIsNot(type(proxy), AopProxy)

    def test_equality_and_hash(self):
        target = Token("x")
        proxy = self._proxy(target, "Token.get")

        self.assertEqual(proxy, Token("x"))
        self.assertEqual(hash(proxy), hash(target))
        self.assertEqual(len({proxy, Token("x")}), 1)

    def test_eq_without_hash_stays_unhashable(self):
        proxy = self._proxy(Unhashable(), "Unhashable.get")

        with self.assertRaises(TypeError):
            hash(proxy)

    def test_proxy_class_built_once_per_type(self):
        self.assertIs(proxy_class_for(Resource), proxy_class_for(Resource))
        self.assertIs(proxy_class_for(Calculator), AopProxy)

    def test_type_without_protocols_uses_plain_proxy(self):
        proxy = self._proxy(Calculator(), "Calculator.add")

        self.assertIs(type(proxy), AopProxy)
        with self.assertRaises(TypeError):
            len(proxy)


if __name__ == '__main__':
    unittest.main()
