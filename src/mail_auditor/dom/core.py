import logging
from dataclasses import dataclass
from typing import Dict, Any, List, Callable, Optional, Set

from .models import HTMLDocument
from ..model import AnalysisOptions

# What a pass hands back to the engine: report field name -> value
PassResult = Dict[str, Any]


def pass_spec(fields: List[str]):
    """
    Decorator to declare which report fields a pass function fills.
    Facilitates auto-discovery by the PassRegistry.
    """
    def decorator(func):
        func.defined_fields = fields
        return func
    return decorator


@dataclass(frozen=True)
class PassContext:
    """Everything a pass may read. Shared by all passes of one analysis call."""
    doc: HTMLDocument
    options: AnalysisOptions
    logger: logging.Logger
    http_service: Optional[Any] = None


class PassDefinition:
    """
    Configuration object binding a named analysis pass to its runner.
    The runner is either a plain function or a coroutine function taking a PassContext.
    """

    def __init__(
            self,
            name: str,
            runner: Callable[[PassContext], Any],
            possible_fields: Optional[List[str]] = None
    ):
        self.name = name
        self.runner = runner

        # --- Auto-Discovery of Report Fields ---
        final_fields: Set[str] = set(possible_fields or [])
        if hasattr(runner, 'defined_fields'):
            final_fields.update(runner.defined_fields)

        self.fields = sorted(list(final_fields))
