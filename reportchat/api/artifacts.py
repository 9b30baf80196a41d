"""Artifact endpoint for binary reports (PDF, DOCX).

Serves payloads registered in the resource registry, inline for in-page
previews or as attachments for downloads.
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request, Response, status

from reportchat.rendering.resources import ResourceRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/artifacts", tags=["artifacts"])


def _get_registry(request: Request) -> ResourceRegistry:
    return request.app.state.resources


def _content_disposition(file_name: str, download: bool) -> str:
    """Build a content-disposition header safe for non-ASCII names."""
    disposition = "attachment" if download else "inline"
    ascii_name = file_name.encode("ascii", "ignore").decode() or "report"
    ascii_name = ascii_name.replace('"', "")
    return f"{disposition}; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(file_name)}"


@router.get("/{handle}")
async def get_artifact(handle: str, request: Request, download: bool = False) -> Response:
    """Return the document registered under a handle.

    Args:
        handle: Resource handle from a document artifact.
        download: Serve as an attachment instead of inline.

    Raises:
        404: Unknown or already released handle.
    """
    resource = _get_registry(request).get(handle)
    if resource is None:
        logger.debug(f"Artifact request for unknown handle {handle}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Artifact not found",
        )

    return Response(
        content=resource.payload,
        media_type=resource.media_type,
        headers={"Content-Disposition": _content_disposition(resource.file_name, download)},
    )
