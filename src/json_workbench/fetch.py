"""Loading JSON input from a URL through an injected fetch client."""

import json
import logging
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional
from .types import WorkbenchError, ErrorType
from .history_store import HistoryStore

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


@dataclass
class HeaderEntry:
    """One request header."""
    key: str
    value: str


@dataclass
class FetchRequest:
    """Request handed to the fetch client."""
    url: str
    method: str = "GET"
    headers: List[HeaderEntry] = field(default_factory=list)
    body: str = ""


@dataclass
class FetchResponse:
    """Response returned by the fetch client."""
    status: int
    status_text: str
    data: Any


class FetchClientInterface(ABC):
    """Abstract interface for the HTTP fetch collaborator."""

    @abstractmethod
    async def fetch(self, request: FetchRequest) -> FetchResponse:
        """Perform the request and return the decoded JSON body."""
        pass


def parse_curl_command(text: str) -> Optional[FetchRequest]:
    """
    Recognise a pasted ``curl`` command.

    Understands ``-X/--request``, ``-H/--header`` and the ``-d/--data``
    family; a body without an explicit method implies POST.

    Returns:
        FetchRequest, or None if the text is not a curl command
    """
    stripped = text.strip()
    if not stripped.startswith("curl "):
        return None

    try:
        tokens = shlex.split(stripped.replace("\\\n", " "))
    except ValueError:
        return None

    url = None
    method = None
    headers: List[HeaderEntry] = []
    body = ""
    i = 1
    while i < len(tokens):
        token = tokens[i]
        value = tokens[i + 1] if i + 1 < len(tokens) else None
        if token in ("-X", "--request") and value is not None:
            method = value.upper()
            i += 2
        elif token in ("-H", "--header") and value is not None:
            key, _, header_value = value.partition(":")
            headers.append(HeaderEntry(key=key.strip(), value=header_value.strip()))
            i += 2
        elif token in ("-d", "--data", "--data-raw", "--data-binary", "--data-ascii") and value is not None:
            body = value
            i += 2
        elif token.startswith("-"):
            i += 1
        else:
            if url is None:
                url = token
            i += 1

    if not url:
        return None
    if method is None:
        method = "POST" if body else "GET"
    return FetchRequest(url=url, method=method, headers=headers, body=body)


class FetchImporter:
    """
    Fetches JSON with a client and loads it into the workbench input.

    The workbench itself performs no network I/O; failures surface as a
    WorkbenchError for the caller to show, never as workbench state.
    """

    def __init__(self, client: FetchClientInterface, logger: Optional[logging.Logger] = None):
        """
        Initialize the importer.

        Args:
            client: Fetch collaborator
            logger: Optional logger instance
        """
        self.client = client
        self.logger = logger or logging.getLogger(__name__)

    async def load(self, store: HistoryStore, request: FetchRequest) -> bool:
        """
        Fetch ``request`` and replace the store's JSON input with the result.

        Returns:
            False when the URL is blank, True once the input was replaced

        Raises:
            WorkbenchError: If the request fails or returns HTTP >= 400
        """
        url = request.url.strip()
        if not url:
            return False

        cleaned = FetchRequest(
            url=url,
            method=request.method.upper(),
            headers=[h for h in request.headers if h.key.strip()],
            body=request.body
        )
        if cleaned.method not in HTTP_METHODS:
            raise WorkbenchError(
                f"Unsupported HTTP method: {cleaned.method}",
                ErrorType.NETWORK_FETCH,
                context={"url": url}
            )

        try:
            response = await self.client.fetch(cleaned)
        except Exception as e:
            raise WorkbenchError(
                str(e) or "Failed to fetch from URL.",
                ErrorType.NETWORK_FETCH,
                context={"url": url}
            ) from e

        if response.status >= 400:
            raise WorkbenchError(
                f"HTTP {response.status} {response.status_text}".rstrip(),
                ErrorType.NETWORK_FETCH,
                context={"url": url, "status": response.status}
            )

        store.set_json_input(json.dumps(response.data, indent=2, ensure_ascii=False))
        self.logger.info(f"Loaded JSON input from {cleaned.method} {url}")
        return True
