"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - models/: Pydantic validation and tagged unions
    - client/: Configuration, classification and transport failures
    - rendering/: Sanitization, markdown and resource handles
    - session/: Session store invariants

Follows single responsibility per test function. Leverages pytest-check for
multiple assertions per test.
"""
