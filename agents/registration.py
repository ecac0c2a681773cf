"""Agent self-registration with the coordinator."""

from typing import Optional
import logging

import httpx

from app.config import AgentSettings

logger = logging.getLogger(__name__)


async def register_with_coordinator(
    settings: AgentSettings,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout_seconds: float = 10.0,
) -> bool:
    """
    Announce this agent to the coordinator.

    Args:
        settings: Agent settings; orchestrator_url must be set
        http_client: Client to use instead of a fresh one
        timeout_seconds: Request timeout

    Returns:
        True if the coordinator accepted the registration
    """
    if not settings.orchestrator_url:
        raise ValueError("orchestrator_url is not configured")

    url = f"{settings.orchestrator_url}/agents/register"
    payload = {"id": settings.agent_id, "address": settings.address}

    try:
        if http_client is not None:
            response = await http_client.post(url, json=payload, timeout=timeout_seconds)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, json=payload, timeout=timeout_seconds)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to register agent {settings.agent_id} with {url}: {e}")
        return False

    logger.info(f"Registered agent {settings.agent_id} ({settings.address}) with {url}")
    return True
