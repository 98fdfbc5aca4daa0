"""
Member directory feed: the spreadsheet published as CSV.
"""
import logging
from typing import Optional

from ..errors import TransientNetworkError
from ..settings import settings
from . import http_client

logger = logging.getLogger(__name__)


async def fetch_member_feed(url: Optional[str] = None) -> Optional[str]:
    """
    Download the raw CSV text of the member directory.
    Returns None when the feed is misconfigured or cannot be fetched.
    """
    if url is None:
        try:
            settings.validate()
        except ValueError as e:
            logger.error(f"Member feed not configured: {e}")
            return None
        url = settings.MEMBER_FEED_URL

    try:
        resp = await http_client.get(url)
    except TransientNetworkError as e:
        logger.warning(f"Member feed unavailable: {e}")
        return None

    resp.encoding = "utf-8"
    return resp.text
