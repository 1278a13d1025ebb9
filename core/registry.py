"""Hello World MCP Server — Capability Registry

- CapabilityModule: base class for the built-in modules; every hook
  defaults to contributing nothing
- Registries enforce uniqueness (no silent overwrites)
- Registries freeze after startup; any later registration is rejected
- Listings are returned in declaration order as fresh copies
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Dict, Generic, Iterable, List, Optional, TypeVar

from models.models import Prompt, Resource, Tool

logger = logging.getLogger("hello.registry")

T = TypeVar("T")


class CapabilityModule:
    module_id: str = "unknown"

    def register_tools(self) -> List[Tool]:
        return []

    def register_resources(self) -> List[Resource]:
        return []

    def register_prompts(self) -> List[Prompt]:
        return []


class _Registry(ABC, Generic[T]):
    kind = "item"

    def __init__(self):
        self._items: Dict[str, T] = {}
        self._frozen = False

    @staticmethod
    @abstractmethod
    def _key(item: T) -> str:
        pass

    def register(self, item: T) -> None:
        key = self._key(item)
        if self._frozen:
            raise RegistrationError(
                f"Cannot register {self.kind} '{key}': registry is frozen"
            )
        if key in self._items:
            raise RegistrationError(f"{self.kind.capitalize()} '{key}' already registered")
        self._items[key] = item
        logger.info(f"{self.kind.capitalize()} registered: {key}")

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, key: str) -> Optional[T]:
        return self._items.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


class ToolRegistry(_Registry[Tool]):
    kind = "tool"

    @staticmethod
    def _key(item: Tool) -> str:
        return item.name

    def list_tools(self) -> List[dict]:
        return [tool.describe() for tool in self._items.values()]


class ResourceRegistry(_Registry[Resource]):
    kind = "resource"

    @staticmethod
    def _key(item: Resource) -> str:
        return item.uri

    def list_resources(self) -> List[dict]:
        return [resource.describe() for resource in self._items.values()]


class PromptRegistry(_Registry[Prompt]):
    kind = "prompt"

    @staticmethod
    def _key(item: Prompt) -> str:
        return item.name

    def list_prompts(self) -> List[dict]:
        return [prompt.describe() for prompt in self._items.values()]


class CapabilityRegistry:
    """The three registries, populated once from modules and then frozen."""

    def __init__(self):
        self.tools = ToolRegistry()
        self.resources = ResourceRegistry()
        self.prompts = PromptRegistry()

    def load(self, modules: Iterable[CapabilityModule]) -> "CapabilityRegistry":
        for mod in modules:
            for tool in mod.register_tools():
                self.tools.register(tool)
            for resource in mod.register_resources():
                self.resources.register(resource)
            for prompt in mod.register_prompts():
                self.prompts.register(prompt)
            logger.debug(f"Module loaded: {mod.module_id}")
        self.freeze()
        return self

    def freeze(self) -> None:
        self.tools.freeze()
        self.resources.freeze()
        self.prompts.freeze()

    def summary(self) -> str:
        return (
            f"tools={len(self.tools)} resources={len(self.resources)} "
            f"prompts={len(self.prompts)}"
        )


class RegistrationError(Exception):
    """Raised when a duplicate or post-freeze registration is attempted."""
