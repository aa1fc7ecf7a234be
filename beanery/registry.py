"""
BeanDefinitionRegistry

Name-keyed store of bean definitions. Registration never validates
references: a definition may point at a name that is registered later.
"""

from dataclasses import replace
from typing import Dict, Iterator, List

from .definition import BeanDefinition
from .exceptions import NotFoundError


class BeanDefinitionRegistry:
    """Insert-or-overwrite registry of BeanDefinitions.

    Iteration follows registration order. Overwriting a name keeps its
    original position.
    """

    def __init__(self):
        self._definitions: Dict[str, BeanDefinition] = {}
        self._revision = 0

    @property
    def revision(self) -> int:
        """Counter bumped by every register and remove."""
        return self._revision

    def register(self, definition: BeanDefinition) -> None:
        """Register a definition under its own name, replacing any previous one."""
        if not definition.name:
            raise ValueError("Bean definition name must not be empty")
        self._definitions[definition.name] = definition
        self._revision += 1

    def register_bean_definition(self, name: str, definition: BeanDefinition) -> None:
        """Register a definition under ``name``.

        A definition carrying a different name is copied and renamed so the
        registry key and ``definition.name`` always agree.
        """
        if definition.name != name:
            definition = replace(definition, name=name)
        self.register(definition)

    def lookup(self, name: str) -> BeanDefinition:
        """Return the definition registered as ``name``.

        Raises:
            NotFoundError: When no definition has that name
        """
        definition = self._definitions.get(name)
        if definition is None:
            registered = ", ".join(self._definitions) or "None"
            raise NotFoundError(
                f"No bean named '{name}' is defined.\n"
                f"Registered beans: {registered}",
                bean_name=name,
            )
        return definition

    def contains(self, name: str) -> bool:
        return name in self._definitions

    def remove(self, name: str) -> BeanDefinition:
        definition = self.lookup(name)
        del self._definitions[name]
        self._revision += 1
        return definition

    def names(self) -> List[str]:
        return list(self._definitions)

    def definitions(self) -> List[BeanDefinition]:
        return list(self._definitions.values())

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[BeanDefinition]:
        return iter(self.definitions())

    def __len__(self) -> int:
        return len(self._definitions)
