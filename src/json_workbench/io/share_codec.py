"""Share tokens: the editable workbench state packed into a URL fragment."""

import asyncio
import base64
import binascii
import gzip
import json
import logging
import zlib
from urllib.parse import unquote
from typing import Optional, TYPE_CHECKING
from ..types import (
    ShareCodecInterface,
    SharePayload,
    WorkbenchError,
    ErrorType
)
from ..error_handler import ErrorHandler
from ..utils.validation import ValidationUtils

if TYPE_CHECKING:
    from ..history_store import HistoryStore

SHARE_V2_MARKER = "#sharev2="
SHARE_LEGACY_MARKER = "#share="


class ShareCodec(ShareCodecInterface):
    """
    Encodes and decodes share tokens.

    Current tokens are gzip-compressed compact JSON in URL-safe base64
    without padding (``#sharev2=``). Legacy tokens are plain base64 of the
    JSON text (``#share=``) and are still accepted. Decoding never raises:
    an unusable token decodes to None.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the share codec.

        Args:
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)

    async def encode(self, payload: SharePayload) -> str:
        """
        Encode a payload into a compressed, URL-safe token.

        Args:
            payload: Editable state to share

        Returns:
            Token for a ``#sharev2=`` fragment
        """
        raw = self._serialize(payload)
        loop = asyncio.get_running_loop()
        compressed = await loop.run_in_executor(None, gzip.compress, raw)
        return base64.urlsafe_b64encode(compressed).decode('ascii').rstrip('=')

    async def decode(self, token: str) -> Optional[SharePayload]:
        """
        Decode a compressed token.

        Returns:
            SharePayload, or None if the token is corrupt
        """
        try:
            compressed = self._b64decode(token, urlsafe=True)
            loop = asyncio.get_running_loop()
            raw = await loop.run_in_executor(None, gzip.decompress, compressed)
            return self._deserialize(raw)
        except (ValueError, RecursionError, binascii.Error, OSError, EOFError, zlib.error,
                WorkbenchError) as e:
            return self._ignore(token, e)

    def encode_legacy(self, payload: SharePayload) -> str:
        """Encode a payload as an uncompressed ``#share=`` token."""
        return base64.b64encode(self._serialize(payload)).decode('ascii')

    def decode_legacy(self, token: str) -> Optional[SharePayload]:
        """
        Decode an uncompressed ``#share=`` token.

        The token may arrive percent-encoded from a URL bar.

        Returns:
            SharePayload, or None if the token is corrupt
        """
        try:
            return self._deserialize(self._b64decode(unquote(token), urlsafe=False))
        except (ValueError, RecursionError, WorkbenchError) as e:
            return self._ignore(token, e)

    def build_share_url(self, base_url: str, token: str) -> str:
        """Attach a compressed token to a page URL, replacing any fragment."""
        return f"{base_url.split('#', 1)[0]}{SHARE_V2_MARKER}{token}"

    async def parse_fragment(self, fragment: str) -> Optional[SharePayload]:
        """
        Decode the share data in a URL or bare fragment.

        Args:
            fragment: ``#sharev2=...``, ``#share=...`` or a full URL ending
                in one of them

        Returns:
            SharePayload, or None when there is no usable share data
        """
        if '#' not in fragment:
            return None
        fragment = '#' + fragment.split('#', 1)[1]

        if fragment.startswith(SHARE_V2_MARKER):
            return await self.decode(fragment[len(SHARE_V2_MARKER):])
        if fragment.startswith(SHARE_LEGACY_MARKER):
            return self.decode_legacy(fragment[len(SHARE_LEGACY_MARKER):])
        return None

    async def hydrate(self, store: 'HistoryStore', fragment: str) -> bool:
        """
        Load share data from a fragment into a store.

        Returns:
            True if the store was updated
        """
        payload = await self.parse_fragment(fragment)
        if payload is None:
            return False
        return store.apply_share_payload(payload)

    def _serialize(self, payload: SharePayload) -> bytes:
        return json.dumps(payload.to_dict(), ensure_ascii=False, separators=(',', ':')).encode('utf-8')

    def _deserialize(self, raw: bytes) -> SharePayload:
        data = ValidationUtils.loads(raw.decode('utf-8'))
        payload = SharePayload.from_dict(data)

        validation = ValidationUtils.validate_share_payload(payload)
        if not validation.is_valid:
            raise WorkbenchError(
                "; ".join(error.message for error in validation.errors),
                ErrorType.SHARE_DECODE
            )
        return payload

    @staticmethod
    def _b64decode(token: str, urlsafe: bool) -> bytes:
        token = token.strip()
        padded = token + '=' * (-len(token) % 4)
        if urlsafe:
            return base64.urlsafe_b64decode(padded)
        return base64.b64decode(padded)

    def _ignore(self, token: str, error: Exception) -> None:
        if not isinstance(error, WorkbenchError):
            error = WorkbenchError(f"Invalid share token: {error}", ErrorType.SHARE_DECODE,
                                   context={"token_length": len(token)})
        self.error_handler.handle_error(error)
        return None
