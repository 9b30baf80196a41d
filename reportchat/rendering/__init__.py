"""Turns classified results into displayable artifacts.

Responsibilities:
    - HTML sanitization against script and style injection
    - Markdown rendering for chat display
    - Resource handles for binary documents (the download-URL lifecycle)

Allocates handles but never releases them: ownership passes to the message
that stores the artifact.
"""

from reportchat.rendering.markup import markdown_to_html, sanitize_html
from reportchat.rendering.resolver import ArtifactResolver
from reportchat.rendering.resources import ResourceRegistry, StoredResource

__all__ = [
    "ArtifactResolver",
    "ResourceRegistry",
    "StoredResource",
    "markdown_to_html",
    "sanitize_html",
]
