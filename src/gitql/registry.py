"""Module registry: the name-keyed set of virtual table sources.

Built once during initialization and immutable afterwards. The registry
is passed explicitly to register_modules() instead of living in module
state.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from gitql.protocols import VirtualModule
from gitql.sources.commits import CommitsModule
from gitql.sources.refs import RefsModule

COMMITS_MODULE_NAME = "git_log"
REFS_MODULE_NAME = "git_ref"


class ModuleRegistry(Mapping[str, VirtualModule]):
    """Read-only mapping of module name -> VirtualModule."""

    def __init__(self, modules: Iterable[tuple[str, VirtualModule]]) -> None:
        entries: dict[str, VirtualModule] = {}
        for name, module in modules:
            key = name.lower()
            if key in entries:
                raise ValueError(f"Module {name!r} already registered")
            if not isinstance(module, VirtualModule):
                raise TypeError(f"{module!r} does not implement VirtualModule")
            entries[key] = module
        self._modules = MappingProxyType(entries)

    def __getitem__(self, name: str) -> VirtualModule:
        return self._modules[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        return f"ModuleRegistry({sorted(self._modules)})"


def build_registry(
    *,
    commits_module: str = COMMITS_MODULE_NAME,
    refs_module: str = REFS_MODULE_NAME,
) -> ModuleRegistry:
    """Registry holding the commit and reference sources."""
    return ModuleRegistry([
        (commits_module, CommitsModule()),
        (refs_module, RefsModule()),
    ])
