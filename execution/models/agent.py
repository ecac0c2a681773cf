# Agent model
"""Remote evaluation endpoint"""
from datetime import datetime, timezone

from pydantic import BaseModel, Field


class Agent(BaseModel):
    """A worker agent reachable over HTTP"""
    id: str
    address: str  # host:port or full http(s) base URL
    registered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def base_url(self) -> str:
        if self.address.startswith(("http://", "https://")):
            return self.address.rstrip("/")
        return f"http://{self.address.rstrip('/')}"

    @property
    def task_url(self) -> str:
        return f"{self.base_url}/task"
