# Core coordination components
"""Core coordination components"""
from .registry import AgentRegistry
from .client import AgentClient
from .dispatcher import Dispatcher

__all__ = [
    "AgentRegistry",
    "AgentClient",
    "Dispatcher",
]
