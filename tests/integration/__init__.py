"""Integration tests for components working together as a system.

Coverage:
    - Conversation flow from user input to assistant artifact
    - Concurrent requests across sessions and session deletion mid-flight
    - Session hydration from the listing endpoints
    - Artifact endpoint with real HTTP requests through ASGITransport

Only the report backend is faked (httpx.MockTransport).
"""
