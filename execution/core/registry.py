# Agent registration and selection
"""Agent registry with round-robin selection"""
from typing import Dict, List, Optional
import logging
import threading

from execution.models import Agent, NoAgentsAvailableError

logger = logging.getLogger(__name__)


class AgentRegistry:
    """
    Known worker agents in registration order

    The round-robin cursor is stored with the agent list and only changes
    under the same lock as selection.
    """

    def __init__(self, agents: Optional[List[Agent]] = None):
        self._agents: List[Agent] = []
        self._cursor = 0
        self._lock = threading.Lock()

        for agent in agents or []:
            self.register(agent)

    def register(self, agent: Agent) -> Agent:
        """
        Register an agent

        Re-registering a known id updates its address and keeps its slot.

        Args:
            agent: Agent to register

        Returns:
            The registered agent
        """
        with self._lock:
            for i, existing in enumerate(self._agents):
                if existing.id == agent.id:
                    updated = existing.model_copy(update={"address": agent.address})
                    self._agents[i] = updated
                    break
            else:
                updated = None
                self._agents.append(agent)

        if updated is not None:
            logger.info(f"Updated agent {agent.id}: {agent.address}")
            return updated.model_copy()
        logger.info(f"Registered agent {agent.id}: {agent.address}")
        return agent.model_copy()

    def unregister(self, agent_id: str) -> bool:
        """
        Remove an agent

        Args:
            agent_id: Id of agent to remove

        Returns:
            True if the agent was registered
        """
        with self._lock:
            for i, existing in enumerate(self._agents):
                if existing.id == agent_id:
                    del self._agents[i]
                    if i < self._cursor:
                        self._cursor -= 1
                    if self._cursor >= len(self._agents):
                        self._cursor = 0
                    break
            else:
                logger.warning(f"Agent '{agent_id}' not registered")
                return False

        logger.info(f"Unregistered agent: {agent_id}")
        return True

    def next_agent(self) -> Agent:
        """
        Select the next agent in round-robin order

        Returns:
            Selected agent

        Raises:
            NoAgentsAvailableError: If no agents are registered
        """
        with self._lock:
            if not self._agents:
                raise NoAgentsAvailableError("No available agents")
            agent = self._agents[self._cursor]
            self._cursor = (self._cursor + 1) % len(self._agents)
            return agent.model_copy()

    def get(self, agent_id: str) -> Optional[Agent]:
        """Get agent by id"""
        with self._lock:
            for agent in self._agents:
                if agent.id == agent_id:
                    return agent.model_copy()
        return None

    def list_all(self) -> List[Agent]:
        """List agents in registration order"""
        with self._lock:
            return [agent.model_copy() for agent in self._agents]

    def get_statistics(self) -> Dict:
        """Get registry statistics"""
        with self._lock:
            return {
                "total_agents": len(self._agents),
                "next_index": self._cursor,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._agents)
