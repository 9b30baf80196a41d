"""HTML sanitization and Markdown rendering using nh3 and markdown."""

import markdown
import nh3

# Elements removed together with their content, not just unwrapped.
_STRIPPED_CONTENT_TAGS = {"script", "style"}
_MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]


def sanitize_html(raw: str) -> str:
    """Strip executable and unsafe-embed content from an HTML fragment.

    Benign structural and formatting markup (paragraphs, headings, lists,
    tables, links, emphasis) is preserved.

    Args:
        raw: Untrusted HTML.

    Returns:
        HTML that is safe to render directly.
    """
    return nh3.clean(raw, clean_content_tags=_STRIPPED_CONTENT_TAGS)


def markdown_to_html(text: str) -> str:
    """Convert markdown to sanitized HTML for chat display."""
    rendered = markdown.markdown(text, extensions=_MARKDOWN_EXTENSIONS)
    return sanitize_html(rendered)
