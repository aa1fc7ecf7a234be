"""
Test Fixtures

Common test classes used across test modules
"""

from typing import Any, List, Mapping, Optional

from beanery import (
    BeanFactoryAware,
    BeanNameAware,
    BeanPostProcessor,
    DisposableBean,
    EnvironmentAware,
    FactoryBean,
    InitializingBean,
    after,
    after_returning,
    around,
    aspect,
    before,
)


class Database:
    """Test database class"""

    def __init__(self):
        self.name = "TestDB"
        self.connected = False
        self.closed = False

    def connect(self):
        self.connected = True

    def close(self):
        self.closed = True


class CacheService:
    """Test cache service"""

    def __init__(self):
        self.cache = {}


class UserDao:
    """DAO wired by field injection"""
    db: Database

    def __init__(self):
        self.db = None

    def find(self, user_id: int) -> str:
        return f"user-{user_id}"


class UserService:
    """Service with a typed field and a literal field"""
    dao: UserDao
    retries: int

    def __init__(self):
        self.dao = None
        self.retries = 1

    def find_user(self, user_id: int) -> str:
        return self.dao.find(user_id)

    def save_user(self, name: str) -> str:
        return f"saved {name}"


class UserRepository:
    """Repository with constructor dependencies"""

    def __init__(self, db: Database, cache: CacheService):
        self.db = db
        self.cache = cache


class CounterService:
    """Service with mutable state for testing singleton behavior"""

    def __init__(self):
        self.counter = 0

    def increment(self):
        self.counter += 1
        return self.counter


class CycleA:
    """Half of a field cycle"""

    def __init__(self):
        self.b = None


class CycleB:
    """Other half of a field cycle"""

    def __init__(self):
        self.a = None


class CtorA:
    """Half of a constructor cycle"""

    def __init__(self, b):
        self.b = b


class CtorB:
    """Other half of a constructor cycle"""

    def __init__(self, a):
        self.a = a


class LifecycleBean(EnvironmentAware, BeanNameAware, BeanFactoryAware, InitializingBean, DisposableBean):
    """Records every container callback in order"""

    def __init__(self):
        self.events: List[str] = []
        self.environment: Optional[Mapping[str, Any]] = None
        self.bean_name: Optional[str] = None
        self.bean_factory = None
        self.value = None

    def set_environment(self, environment):
        self.events.append("environment")
        self.environment = environment

    def set_bean_name(self, name):
        self.events.append("name")
        self.bean_name = name

    def set_bean_factory(self, bean_factory):
        self.events.append("factory")
        self.bean_factory = bean_factory

    def after_properties_set(self):
        self.events.append("after_properties_set")

    def custom_init(self):
        self.events.append("custom_init")

    def destroy(self):
        self.events.append("destroy")

    def custom_destroy(self):
        self.events.append("custom_destroy")


class RecordingPostProcessor(BeanPostProcessor):
    """Records the names of beans it sees"""

    def __init__(self):
        self.before: List[str] = []
        self.after: List[str] = []

    def post_process_before_initialization(self, bean, bean_name):
        self.before.append(bean_name)
        return bean

    def post_process_after_initialization(self, bean, bean_name):
        self.after.append(bean_name)
        return bean


class Connection:
    """Product of ConnectionFactory"""

    def __init__(self, url: str):
        self.url = url


class ConnectionFactory(FactoryBean):
    """FactoryBean producing Connections"""
    object_type = Connection

    def __init__(self):
        self.url = "db://localhost"
        self.created = 0

    def get_object(self):
        self.created += 1
        return Connection(self.url)


class PrototypeConnectionFactory(ConnectionFactory):
    """FactoryBean producing a new Connection per lookup"""

    def is_singleton(self):
        return False


class ConnectionPool:
    """Bean built by factory methods"""

    def __init__(self, size: int):
        self.size = size

    @staticmethod
    def create(size):
        return ConnectionPool(size)


class PoolBuilder:
    """Factory bean exposing an instance factory method"""

    def __init__(self):
        self.default_size = 8

    def build(self):
        return ConnectionPool(self.default_size)


class Calculator:
    """Target for AOP tests"""

    def __init__(self):
        self.calls = 0

    def add(self, a, b):
        self.calls += 1
        return a + b

    def fail(self):
        raise ValueError("boom")

    def describe(self):
        return "calculator"


@aspect
class TracingAspect:
    """Aspect recording the advice it runs"""

    def __init__(self):
        self.events: List[str] = []

    @before("Calculator.add")
    def before_add(self, join_point):
        self.events.append(f"before:{join_point.method_name}{join_point.args}")

    @around("Calculator.add")
    def around_add(self, pjp):
        self.events.append("around:enter")
        result = pjp.proceed()
        self.events.append("around:exit")
        return result

    @after("Calculator.*")
    def after_any(self, join_point):
        self.events.append(f"after:{join_point.method_name}")

    @after_returning("Calculator.describe")
    def shout(self, join_point, result):
        return result.upper()
