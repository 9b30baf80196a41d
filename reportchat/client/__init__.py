"""Backend client for report generation.

Responsibilities:
    - Report generation requests with binary-safe response handling
    - Content-type driven classification into typed results
    - Session and chat listing reads used to hydrate the session store
    - Client configuration loaded from the environment

Never raises transport failures past its boundary: every failure becomes an
error result the conversation can display.
"""

from reportchat.client.config import ClientConfig, get_client_config
from reportchat.client.report_client import ReportClient, classify_response

__all__ = ["ClientConfig", "ReportClient", "classify_response", "get_client_config"]
