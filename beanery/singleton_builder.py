"""
SingletonBuilder

Builder behind ``module.single[Type]``. Singletons are created once per
context and cached; eager unless marked lazy.
"""

from typing import TYPE_CHECKING

from .definition_builder import DefinitionBuilder
from .lifecycle import BeanScope

if TYPE_CHECKING:
    from .module import BeanModule


class SingletonBuilder(DefinitionBuilder):
    """Builder for singleton definitions. Every lookup returns the cached instance."""

    def __init__(self, module: 'BeanModule'):
        super().__init__(module, BeanScope.SINGLETON)
