"""
Bounded HTTP GET shared by the integrations.

The blocking requests call runs in a worker thread and the whole call is
capped by asyncio.wait_for, so a stalled server can never hang the caller.
No retries.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from ..errors import TransientNetworkError
from ..settings import settings

logger = logging.getLogger(__name__)


def get_sync(url: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> requests.Response:
    """GET `url`; any transport failure or non-2xx becomes TransientNetworkError."""
    timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
    try:
        resp = requests.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise TransientNetworkError(f"GET {url} failed: {e}") from e
    return resp


async def get(url: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> requests.Response:
    timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(get_sync, url, params, timeout),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise TransientNetworkError(f"GET {url} timed out after {timeout}s") from e
