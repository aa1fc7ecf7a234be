"""
Container Configuration

Validated settings shared by BeanFactory and ApplicationContext
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class ContainerConfig(BaseModel):
    """Container settings.

    Unknown keys are rejected so that a misspelled option fails loudly
    instead of being ignored.

    Example::

        config = ContainerConfig(allow_circular_references=False)
        context = ApplicationContext(modules=[module], config=config)
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    allow_circular_references: bool = Field(
        default=True,
        description="Expose raw singletons early so field/setter cycles resolve",
    )
    default_lazy_init: bool = Field(
        default=False,
        description="Lazy flag for definitions that do not set one explicitly",
    )
    register_shutdown_hook: bool = Field(
        default=False,
        description="Close the context automatically at interpreter exit",
    )
    environment: Dict[str, Any] = Field(
        default_factory=dict,
        description="Values handed to EnvironmentAware beans",
    )
