# agents package
"""Worker agent service: evaluates tasks sent by the coordinator."""

from agents.service import create_agent_app
from agents.registration import register_with_coordinator

__all__ = [
    "create_agent_app",
    "register_with_coordinator",
]
