"""Test package for Report Chat.

Provides test coverage for all components with unit tests for isolated
logic and integration tests for workflows.

Structure:
    - unit/: Individual function and class tests
    - integration/: Conversation and HTTP workflows end to end

The report backend is replaced by httpx.MockTransport; everything above the
transport runs for real. Leverages pytest with pytest-check for soft
assertions.
"""
