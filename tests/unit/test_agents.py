"""Unit tests for the agents resource."""

from __future__ import annotations

import httpx
import pytest
import respx

from navi_sdk import Agent, NaviClient, NotFoundError

AGENTS = [
    {"id": "agent-1", "name": "Support", "description": "Answers tickets", "isDefault": True},
    {"id": "agent-2", "name": "Sales", "description": None, "isDefault": False},
]


class TestAgentsList:
    """Tests for agents.list()."""

    @respx.mock
    def test_list(self, client: NaviClient, base_url: str) -> None:
        """Test parsing of the agent list."""
        route = respx.get(f"{base_url}/agents").mock(return_value=httpx.Response(200, json=AGENTS))

        agents = client.agents.list()

        assert route.calls[0].request.url.params == httpx.QueryParams()
        assert all(isinstance(a, Agent) for a in agents)
        assert agents[0].is_default
        assert agents[1].description is None

    @respx.mock
    def test_list_with_search(self, client: NaviClient, base_url: str) -> None:
        """Test query parameters."""
        route = respx.get(f"{base_url}/agents").mock(return_value=httpx.Response(200, json=[]))

        assert client.agents.list(search="supp", limit=5, offset=10) == []

        params = route.calls[0].request.url.params
        assert params["search"] == "supp"
        assert params["limit"] == "5"
        assert params["offset"] == "10"


class TestAgentsGet:
    """Tests for agents.get()."""

    @respx.mock
    def test_get_found(self, client: NaviClient, base_url: str) -> None:
        """Test finding an agent in the list."""
        respx.get(f"{base_url}/agents").mock(return_value=httpx.Response(200, json=AGENTS))

        agent = client.agents.get("agent-2")

        assert agent.name == "Sales"

    @respx.mock
    def test_get_not_found(self, client: NaviClient, base_url: str) -> None:
        """Test an unknown agent ID."""
        respx.get(f"{base_url}/agents").mock(return_value=httpx.Response(200, json=AGENTS))

        with pytest.raises(NotFoundError, match="agent-9 not found"):
            client.agents.get("agent-9")
