"""
SingletonCache

Tracks construction progress and final instances of singleton beans,
plus the destroy callbacks to run when the container closes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .exceptions import BeanDestructionError
from .lifecycle import SingletonState

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """State-tagged slot for one singleton"""
    state: SingletonState
    instance: Any


class SingletonCache:
    """Enum-tagged singleton cache.

    An entry moves ABSENT -> EARLY_EXPOSED -> FULLY_INITIALIZED -> DESTROYED.
    EARLY_EXPOSED entries hold the raw, not yet populated instance so that a
    recursive lookup during property population can return it instead of
    re-entering construction.

    The instance stored by ``finalize`` may differ from the early one when a
    post-processor substitutes a proxy. Beans that captured the early
    reference keep the pre-proxy object.
    """

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}
        self._disposables: Dict[str, Callable[[], None]] = {}

    def state(self, name: str) -> SingletonState:
        entry = self._entries.get(name)
        return entry.state if entry is not None else SingletonState.ABSENT

    def expose_early(self, name: str, raw_instance: Any) -> None:
        """Publish a raw instance right after instantiation (ABSENT -> EARLY_EXPOSED)."""
        current = self.state(name)
        if current != SingletonState.ABSENT:
            raise RuntimeError(f"Cannot expose '{name}' early: singleton is {current.value}")
        self._entries[name] = CacheEntry(SingletonState.EARLY_EXPOSED, raw_instance)

    def finalize(self, name: str, instance: Any) -> None:
        """Store the final instance (-> FULLY_INITIALIZED)."""
        current = self.state(name)
        if current not in (SingletonState.ABSENT, SingletonState.EARLY_EXPOSED):
            raise RuntimeError(f"Cannot finalize '{name}': singleton is {current.value}")
        self._entries[name] = CacheEntry(SingletonState.FULLY_INITIALIZED, instance)

    def get_singleton(self, name: str, allow_early: bool = True) -> Optional[Any]:
        """Return the cached instance, or None.

        Args:
            name: Bean name
            allow_early: Also return EARLY_EXPOSED instances
        """
        entry = self._entries.get(name)
        if entry is None:
            return None
        if entry.state == SingletonState.FULLY_INITIALIZED:
            return entry.instance
        if allow_early and entry.state == SingletonState.EARLY_EXPOSED:
            return entry.instance
        return None

    def get_initialized(self, name: str) -> Optional[Any]:
        return self.get_singleton(name, allow_early=False)

    def discard(self, name: str) -> None:
        """Drop the entry of a construction that failed."""
        self._entries.pop(name, None)
        self._disposables.pop(name, None)

    def names(self) -> List[str]:
        return [
            name for name, entry in self._entries.items()
            if entry.state == SingletonState.FULLY_INITIALIZED
        ]

    def register_disposable(self, name: str, destroy: Callable[[], None]) -> None:
        self._disposables[name] = destroy

    def destroy_one(self, name: str) -> Optional[BeanDestructionError]:
        """Destroy and evict a single singleton.

        Returns:
            The wrapped destroy failure, or None when it succeeded
        """
        destroy = self._disposables.pop(name, None)
        self._entries.pop(name, None)
        if destroy is None:
            return None
        return self._run_destroy(name, destroy)

    def destroy_all(self) -> List[BeanDestructionError]:
        """Run every destroy callback in registration order, then clear the cache.

        A failing callback does not stop the remaining ones.

        Returns:
            The collected destroy failures (empty when all succeeded)
        """
        errors: List[BeanDestructionError] = []
        disposables = list(self._disposables.items())
        self._disposables.clear()
        for name, destroy in disposables:
            error = self._run_destroy(name, destroy)
            if error is not None:
                errors.append(error)

        for entry in self._entries.values():
            entry.state = SingletonState.DESTROYED
        self._entries.clear()

        if errors:
            logger.warning("%d bean(s) failed to destroy cleanly", len(errors))
        return errors

    @staticmethod
    def _run_destroy(name: str, destroy: Callable[[], None]) -> Optional[BeanDestructionError]:
        try:
            logger.debug("Destroying singleton bean '%s'", name)
            destroy()
        except Exception as e:
            logger.error("Destroy callback of bean '%s' failed", name, exc_info=True)
            return BeanDestructionError(name, e)
        return None
