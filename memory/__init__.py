"""Memory module for expression state management."""

from memory.store import (
    BaseExpressionStore,
    InMemoryExpressionStore,
)

__all__ = [
    # Store
    "BaseExpressionStore",
    "InMemoryExpressionStore",
]
