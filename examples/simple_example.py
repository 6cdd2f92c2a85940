#!/usr/bin/env python3
"""Simple Navi SDK example - start a conversation and chat with an agent.

Set environment variables before running:
    export NAVI_API_KEY="navi_sk_..."
    export NAVI_BASE_URL="https://your-navi.com"
"""

import logging

from navi_sdk import NaviClient, RateLimitError, StreamEvent

USER_ID = "user-123"
PROMPT = "What can you help me with?"


def print_event(event: StreamEvent) -> None:
    if event.is_text_delta and event.type == "response_delta":
        print(event.get_text() or "", end="", flush=True)
    elif event.is_tool_event:
        print(f"\n[{event.type}: {event.get_tool_name()}]")
    elif event.is_error:
        print(f"\nError: {event.get_error()}")


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    # Uses NAVI_API_KEY and NAVI_BASE_URL
    with NaviClient() as client:
        # =====================================================================
        # Step 1: Check the integration
        # =====================================================================
        status = client.status()
        print(f"Integration: {status.integration_name} ({status.status})")

        # =====================================================================
        # Step 2: Start a conversation with the default agent
        # =====================================================================
        agent_id = status.default_agent_id or client.agents.list()[0].id
        conversation = client.conversations.create(
            agent_id=agent_id, user_id=USER_ID, title="SDK example"
        )
        print(f"Conversation: {conversation.id}\n")

        # =====================================================================
        # Step 3: Chat three ways
        # =====================================================================
        try:
            # Callback per event
            client.conversations.chat(conversation.id, PROMPT, print_event)
            print("\n")

            # Lazy iteration
            with client.conversations.chat_stream(conversation.id, "Tell me more") as stream:
                for event in stream:
                    print_event(event)
            print("\n")

            # Whole answer at once
            response = client.conversations.chat_sync(
                conversation.id,
                "Summarize in one sentence",
                runtime_params={"user_id": USER_ID},
            )
            print(response.content)
            print(f"\n{response.tokens_used} tokens in {response.duration_ms}ms")
        except RateLimitError as e:
            print(f"Rate limited, retry in {e.retry_after or 60}s")

        client.conversations.close(conversation.id)


if __name__ == "__main__":
    main()
