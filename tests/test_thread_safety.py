"""
Thread Safety Tests

Tests for concurrent bean lookup:
- First-time singleton construction happens once
- Each thread runs its own construction context
- Proxied calls never share an invocation
"""

import concurrent.futures
import os
import sys
import threading
import time
import unittest
from typing import List

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from conftest import BeaneryTestCase
from beanery import BeanModule, around, aspect, ref
from beanery.resolution_context import _resolution_context
from fixtures import CycleA, CycleB


class SlowService:
    """Singleton whose construction takes a while"""
    created = 0
    lock = threading.Lock()

    def __init__(self):
        time.sleep(0.05)
        with SlowService.lock:
            SlowService.created += 1


class Worker:
    """Prototype recording the thread that built it"""

    def __init__(self):
        self.thread_id = threading.current_thread().ident


class Adder:
    def add(self, a, b):
        time.sleep(0.01)
        return a + b


@aspect
class DoublingAspect:
    @around("Adder.add")
    def double(self, pjp):
        return pjp.proceed() * 2


class TestConcurrentSingletons(BeaneryTestCase):
    """First-time singleton construction under contention"""

    def setUp(self):
        super().setUp()
        SlowService.created = 0

    def test_concurrent_first_lookup_builds_one_instance(self):
        module = BeanModule()
        with module:
            module.single[SlowService](lazy_init=True)

        context = self.create_context(module)

        with concurrent.futures.ThreadPoolExecutor(max_workers=10) as executor:
            futures = [executor.submit(context.get_bean, "slowService") for _ in range(10)]
            instances = [f.result() for f in futures]

        self.assertEqual(SlowService.created, 1)
        self.assertTrue(all(instance is instances[0] for instance in instances))

    def test_concurrent_cycle_resolution(self):
        module = BeanModule()
        with module:
            module.single[CycleA]("a", properties={"b": ref("b")}, lazy_init=True)
            module.single[CycleB]("b", properties={"a": ref("a")}, lazy_init=True)

        context = self.create_context(module)
        names = ["a", "b"] * 5

        with concurrent.futures.ThreadPoolExecutor(max_workers=10) as executor:
            results = list(executor.map(context.get_bean, names))

        a, b = context.get_bean("a"), context.get_bean("b")
        self.assertIs(a.b, b)
        self.assertIs(b.a, a)
        for name, bean in zip(names, results):
            self.assertIs(bean, a if name == "a" else b)


class TestConcurrentPrototypes(BeaneryTestCase):
    """Prototype lookups from many threads"""

    def test_each_thread_gets_its_own_instance(self):
        module = BeanModule()
        with module:
            module.prototype[Worker]()

        context = self.create_context(module)
        results: List[Worker] = []
        errors: List[Exception] = []

        def resolve_in_thread():
            try:
                results.append(context.get_bean("worker"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=resolve_in_thread) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(errors), 0, f"Errors occurred: {errors}")
        self.assertEqual(len({id(worker) for worker in results}), 10)

    def test_no_construction_context_left_behind(self):
        module = BeanModule()
        with module:
            module.prototype[Worker]()

        context = self.create_context(module)

        def resolve():
            context.get_bean("worker")
            return _resolution_context.get()

        with concurrent.futures.ThreadPoolExecutor(max_workers=4) as executor:
            leftovers = list(executor.map(lambda _: resolve(), range(8)))

        self.assertEqual(leftovers, [None] * 8)
        self.assertIsNone(_resolution_context.get())


class TestConcurrentProxyCalls(BeaneryTestCase):
    """Proxied calls from many threads"""

    def test_calls_do_not_share_invocations(self):
        module = BeanModule()
        with module:
            module.enable_aspects()
            module.single[DoublingAspect]()
            module.single[Adder]()

        context = self.create_context(module)
        adder = context.get_bean("adder")

        with concurrent.futures.ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda n: adder.add(n, n), range(20)))

        self.assertEqual(results, [4 * n for n in range(20)])


if __name__ == '__main__':
    unittest.main()
