"""Abstract base unit loader."""

from __future__ import annotations

import abc

from gta.models import UnitDescriptor


class UnitLoader(abc.ABC):
    """Produces the raw unit graph the dependency graph is built from."""

    @abc.abstractmethod
    def load(self, include_prefixes: list[str], tags: list[str]) -> list[UnitDescriptor]:
        """Load units under the include prefixes (all when empty) with the given build tags.

        Raises LoadError when the unit graph cannot be produced at all.
        """
