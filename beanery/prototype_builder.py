"""
PrototypeBuilder

Builder behind ``module.prototype[Type]``. Prototypes are never cached
and never destroyed by the context.
"""

from typing import TYPE_CHECKING

from .definition_builder import DefinitionBuilder
from .lifecycle import BeanScope

if TYPE_CHECKING:
    from .module import BeanModule


class PrototypeBuilder(DefinitionBuilder):
    """Builder for prototype definitions. Every lookup creates a new instance."""

    def __init__(self, module: 'BeanModule'):
        super().__init__(module, BeanScope.PROTOTYPE)
