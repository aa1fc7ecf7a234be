"""
Lifecycle Enums

Bean scopes, singleton cache states and container states
"""

from enum import Enum


class BeanScope(Enum):
    """Scope of a bean definition"""
    SINGLETON = "singleton"
    PROTOTYPE = "prototype"


class SingletonState(Enum):
    """Construction progress of a singleton.

    Transitions only move forward within one container lifetime:
    ABSENT -> EARLY_EXPOSED -> FULLY_INITIALIZED -> DESTROYED.
    """
    ABSENT = "absent"
    EARLY_EXPOSED = "early_exposed"
    FULLY_INITIALIZED = "fully_initialized"
    DESTROYED = "destroyed"


class ContextState(Enum):
    """State of an ApplicationContext"""
    UNINITIALIZED = "uninitialized"
    REFRESHING = "refreshing"
    ACTIVE = "active"
    CLOSED = "closed"
