"""Process settings for the coordinator and agent services."""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional
import logging
import os

from execution.models import Agent

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO"):
    """Configure root logging for a service process."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT, force=True)


def _env_str(env: Mapping[str, str], name: str, default: str) -> str:
    value = env.get(name, "").strip()
    return value or default


def _env_int(env: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def parse_agents(value: Optional[str]) -> List[Agent]:
    """
    Parse a static agent list

    "agent-1=127.0.0.1:8081,agent-2=http://10.0.0.5:8081" -> [Agent, Agent]
    Entries without an id use their address as id.
    """
    agents: List[Agent] = []
    if not value:
        return agents
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" in part:
            agent_id, address = (p.strip() for p in part.split("=", 1))
        else:
            agent_id, address = part, part
        if not agent_id or not address:
            raise ValueError(f"Invalid agent entry: {part!r}")
        agents.append(Agent(id=agent_id, address=address))
    return agents


@dataclass
class CoordinatorSettings:
    """Coordinator configuration"""
    host: str = "0.0.0.0"
    port: int = 8080
    agents: List[Agent] = field(default_factory=list)
    dispatch_timeout_seconds: float = 30.0
    dispatch_max_attempts: int = 1
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "CoordinatorSettings":
        env = os.environ if env is None else env
        return cls(
            host=_env_str(env, "COORDINATOR_HOST", cls.host),
            port=_env_int(env, "COORDINATOR_PORT", cls.port),
            agents=parse_agents(env.get("COORDINATOR_AGENTS")),
            dispatch_timeout_seconds=_env_float(
                env, "DISPATCH_TIMEOUT_SECONDS", cls.dispatch_timeout_seconds
            ),
            dispatch_max_attempts=_env_int(
                env, "DISPATCH_MAX_ATTEMPTS", cls.dispatch_max_attempts
            ),
            log_level=_env_str(env, "LOG_LEVEL", cls.log_level),
        )


@dataclass
class AgentSettings:
    """Worker agent configuration"""
    agent_id: str = "agent-1"
    host: str = "0.0.0.0"
    port: int = 8081
    advertise_address: Optional[str] = None
    computing_power: int = 4
    orchestrator_url: Optional[str] = None
    log_level: str = "INFO"

    @property
    def address(self) -> str:
        """Address the coordinator should use to reach this agent"""
        return self.advertise_address or f"127.0.0.1:{self.port}"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AgentSettings":
        env = os.environ if env is None else env
        return cls(
            agent_id=_env_str(env, "AGENT_ID", cls.agent_id),
            host=_env_str(env, "AGENT_HOST", cls.host),
            port=_env_int(env, "AGENT_PORT", cls.port),
            advertise_address=env.get("AGENT_ADVERTISE_ADDRESS", "").strip() or None,
            computing_power=_env_int(env, "COMPUTING_POWER", cls.computing_power),
            orchestrator_url=env.get("ORCHESTRATOR_URL", "").strip().rstrip("/") or None,
            log_level=_env_str(env, "LOG_LEVEL", cls.log_level),
        )
