# src/mail_auditor/dom/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Optional, Set

from .core import PassDefinition

logger = logging.getLogger(__name__)


class PassRegistry:
    """
    Central registry for analysis passes.

    Dynamically discovers and loads PassDefinition modules from the
    'mail_auditor.passes' package and collects the report fields they fill.
    """

    _passes: Dict[str, PassDefinition] = {}
    _all_fields: Set[str] = set()
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all pass definitions found in the 'mail_auditor.passes' package.

        Every module exposing a `DEFINITION` attribute (instance of `PassDefinition`)
        is registered under its pass name. Modules are visited in name order so the
        pass order is stable between runs.
        """
        if cls._loaded:
            return

        import mail_auditor.passes as passes_pkg

        for _, name, _ in sorted(pkgutil.iter_modules(passes_pkg.__path__), key=lambda m: m.name):
            full_name = f"mail_auditor.passes.{name}"
            module = importlib.import_module(full_name)
            defn = getattr(module, "DEFINITION", None)
            if not isinstance(defn, PassDefinition):
                continue

            cls._passes[defn.name] = defn
            cls._all_fields.update(defn.fields)
            logger.debug("Analysis pass loaded: %s -> %s", defn.name, ", ".join(defn.fields))

        cls._loaded = True

    @classmethod
    def get_pass(cls, name: str) -> Optional[PassDefinition]:
        """Retrieves a registered pass by name."""
        return cls._passes.get(name)

    @classmethod
    def get_all_passes(cls) -> List[PassDefinition]:
        """Returns all registered passes in registration order."""
        return list(cls._passes.values())

    @classmethod
    def get_all_fields(cls) -> List[str]:
        """Returns every report field filled by at least one pass."""
        return sorted(list(cls._all_fields))
