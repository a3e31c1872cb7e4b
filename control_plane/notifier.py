"""
Control Plane — Push notifications.
Best-effort delivery to an ntfy-style topic server. A failed notification is
logged and dropped; callers never see it and nothing is retried.
"""
import logging
from typing import Optional

import httpx

from .config import NotificationConfig
from .validators import push_enabled

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    async def send(self, config: NotificationConfig, title: str, body: str) -> None:
        if not push_enabled(config):
            return

        ntfy = config.ntfy
        # the topic is part of the path, not the payload
        url = ntfy.server + "/" + ntfy.topic
        # header values go out as UTF-8 bytes, emoji included
        headers = {"Title": title.encode("utf-8")}
        if ntfy.auth_header:
            headers["Authorization"] = ntfy.auth_header.encode("utf-8")
        # zero or less means no timeout
        timeout = ntfy.timeout if ntfy.timeout > 0 else None

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=timeout) as client:
                resp = await client.post(url, content=body.encode("utf-8"), headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("[notify] ntfy request failed: %s", e)
            return

        if resp.is_error:
            logger.warning("[notify] ntfy responded %s for topic %s", resp.status_code, ntfy.topic)
