"""Agents resource for Navi SDK."""

from __future__ import annotations

import builtins
from typing import TYPE_CHECKING, Any

from navi_sdk.exceptions import NotFoundError
from navi_sdk.models import Agent

if TYPE_CHECKING:
    from navi_sdk._http import HTTPClient


class AgentsResource:
    """Discover the agents this integration is allowed to talk to.

    Example usage:
        # List all agents
        for agent in client.agents.list():
            marker = " (default)" if agent.is_default else ""
            print(f"{agent.id}: {agent.name}{marker}")

        # Search by name
        agents = client.agents.list(search="support", limit=5)

        # Get one agent
        agent = client.agents.get("agent-uuid")
    """

    def __init__(self, http: HTTPClient) -> None:
        """Initialize agents resource.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(
        self,
        *,
        search: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> builtins.list[Agent]:
        """List agents available to the integration.

        Args:
            search: Filter agents by name
            limit: Maximum number of agents to return
            offset: Number of agents to skip

        Returns:
            List of Agent
        """
        params: dict[str, Any] = {}
        if search is not None:
            params["search"] = search
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset

        response = self._http.get("/agents", params=params or None)
        items = response if isinstance(response, builtins.list) else []
        return [Agent.model_validate(item) for item in items]

    def get(self, agent_id: str) -> Agent:
        """Get an agent by ID.

        The API has no single-agent route, so this searches the agent list.

        Args:
            agent_id: Agent ID

        Returns:
            The Agent

        Raises:
            NotFoundError: If the agent does not exist or is not allowed
        """
        for agent in self.list():
            if agent.id == agent_id:
                return agent

        raise NotFoundError(message=f"Agent {agent_id} not found or not allowed")
