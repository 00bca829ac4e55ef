"""
Remote Record Service - Upserts completed forms to the record store

The record store keeps one row per panel serial; saving the same serial
again replaces the earlier data.
"""

import json
import logging
import urllib.error
import urllib.request
from typing import Any, Dict, Optional, Tuple

from ..config import Config

logger = logging.getLogger(__name__)


class RemoteRecordService:
    """
    Client for the save-form endpoint.

    POST body: {"serial": str, "data": object}
    Success response: {"success": true}
    Error response: {"error": str}
    """

    def __init__(self, url: Optional[str] = None, timeout: int = Config.REMOTE_TIMEOUT_SEC):
        self._url = url
        self._timeout = timeout

    @property
    def url(self) -> Optional[str]:
        return self._url or Config.get_remote_save_url()

    @property
    def is_configured(self) -> bool:
        return bool(self.url)

    def save(self, serial: Optional[str], data: Optional[Dict[str, Any]]) -> Tuple[bool, Optional[str]]:
        """
        Upsert a form record by panel serial.

        Returns:
            Tuple of (success, error_message)
        """
        serial = (serial or '').strip()
        if not serial or not data:
            return False, "Missing serial or data"

        url = self.url
        if not url:
            return False, "No record store is configured"

        body = json.dumps({'serial': serial, 'data': data}).encode('utf-8')
        req = urllib.request.Request(url, data=body, method='POST')
        req.add_header('Content-Type', 'application/json')
        req.add_header('User-Agent', f'QualityMaster/{Config.APP_VERSION}')

        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                payload = self._read_json(response.read())
                if response.status != 200:
                    return False, payload.get('error') or f"Server returned {response.status}"
        except urllib.error.HTTPError as e:
            payload = self._read_json(e.read())
            message = payload.get('error') or f"Server returned {e.code}"
            logger.warning(f"Record save for {serial} rejected: {message}")
            return False, message
        except (urllib.error.URLError, OSError) as e:
            logger.warning(f"Record save for {serial} failed: {e}")
            return False, f"Could not reach the record store: {e}"

        logger.info(f"Record saved for panel {serial}")
        return True, None

    @staticmethod
    def _read_json(raw: bytes) -> Dict[str, Any]:
        try:
            payload = json.loads(raw.decode('utf-8')) if raw else {}
        except (UnicodeDecodeError, json.JSONDecodeError):
            return {}
        return payload if isinstance(payload, dict) else {}


__all__ = ['RemoteRecordService']
