"""Resolution of classified report results into message artifacts."""

from reportchat.models.schemas import (
    Artifact,
    DocumentArtifact,
    DocumentResult,
    ErrorArtifact,
    ErrorResult,
    HtmlArtifact,
    HtmlResult,
    MarkdownArtifact,
    MarkdownResult,
    ReportResult,
    TextArtifact,
    TextResult,
)
from reportchat.rendering.markup import sanitize_html
from reportchat.rendering.resources import ResourceRegistry


class ArtifactResolver:
    """Maps each result variant onto its artifact variant.

    Binary documents get a resource handle from the registry. The resolver
    never releases handles: whoever stores the artifact owns it.
    """

    def __init__(self, resources: ResourceRegistry) -> None:
        self._resources = resources

    def resolve(self, result: ReportResult) -> Artifact:
        """Turn a result into a renderable artifact.

        Args:
            result: Classified backend result (left unmodified).

        Returns:
            The matching artifact. HTML content is sanitized.

        Raises:
            TypeError: If the result is not a known variant.
        """
        if isinstance(result, TextResult):
            return TextArtifact(content=result.content)
        if isinstance(result, HtmlResult):
            return HtmlArtifact(content=sanitize_html(result.content))
        if isinstance(result, MarkdownResult):
            return MarkdownArtifact(content=result.content)
        if isinstance(result, DocumentResult):
            handle = self._resources.allocate(
                result.payload, result.media_type, result.file_name
            )
            return DocumentArtifact(
                document_type=result.document_type,
                handle=handle,
                file_name=result.file_name,
                media_type=result.media_type,
            )
        if isinstance(result, ErrorResult):
            return ErrorArtifact(message=result.message, error_kind=result.error_kind)

        raise TypeError(f"Unsupported result type: {type(result).__name__}")
