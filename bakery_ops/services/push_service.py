"""Push notification delivery through the Expo push API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from collections.abc import Iterable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from bakery_ops.config import settings
from bakery_ops.services.collaborators import NotifiableWorker, NotificationOutcome, PushMessage

logger = logging.getLogger(__name__)

RECENT_MESSAGE_LIMIT = 500


def build_messages(
    recipients: Iterable[NotifiableWorker],
    title: str,
    body: str,
    data: dict | None = None,
) -> list[PushMessage]:
    seen: set[str] = set()
    messages: list[PushMessage] = []
    for recipient in recipients:
        if not recipient.push_token or recipient.push_token in seen:
            continue
        seen.add(recipient.push_token)
        messages.append(PushMessage(to=recipient.push_token, title=title, body=body, data=dict(data or {})))
    return messages


def chunk_messages(messages: list[PushMessage], batch_size: int) -> list[list[PushMessage]]:
    if batch_size < 1:
        raise ValueError('batch_size must be positive')
    return [messages[i : i + batch_size] for i in range(0, len(messages), batch_size)]


class ExpoPushDispatcher:
    def __init__(
        self,
        *,
        push_url: str | None = None,
        batch_size: int | None = None,
        timeout_seconds: int | None = None,
    ) -> None:
        self.push_url = push_url or settings.expo_push_url
        self.batch_size = batch_size or settings.push_batch_size
        self.timeout_seconds = timeout_seconds or settings.push_timeout_seconds
        self.headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'Accept-Encoding': 'gzip, deflate',
        }

    def _post_batch(self, batch: list[PushMessage]) -> None:
        data = json.dumps([message.to_payload() for message in batch]).encode('utf-8')
        req = Request(url=self.push_url, data=data, headers=self.headers, method='POST')
        try:
            with urlopen(req, timeout=self.timeout_seconds) as response:
                response.read()
        except HTTPError as exc:
            body = exc.read().decode('utf-8', errors='ignore') if exc.fp else ''
            raise RuntimeError(f'Expo push error {exc.code}: {body}') from exc
        except URLError as exc:
            raise RuntimeError(f'Expo push network error: {exc.reason}') from exc

    async def send_batch(self, messages: list[PushMessage]) -> NotificationOutcome:
        if not messages:
            return NotificationOutcome()

        batches = chunk_messages(messages, self.batch_size)
        results = await asyncio.gather(
            *(asyncio.to_thread(self._post_batch, batch) for batch in batches),
            return_exceptions=True,
        )

        sent = 0
        failed = 0
        for batch, result in zip(batches, results):
            if isinstance(result, BaseException):
                failed += len(batch)
                logger.warning('Push batch of %d messages failed: %s', len(batch), result)
            else:
                sent += len(batch)
        return NotificationOutcome(sent=sent, failed=failed)


class LoggingPushDispatcher:
    """Local development dispatcher: records messages instead of sending them."""

    def __init__(self) -> None:
        self.sent_messages: deque[PushMessage] = deque(maxlen=RECENT_MESSAGE_LIMIT)

    async def send_batch(self, messages: list[PushMessage]) -> NotificationOutcome:
        for message in messages:
            logger.info('Push (not sent) to %s: %s - %s', message.to, message.title, message.body)
        self.sent_messages.extend(messages)
        return NotificationOutcome(sent=len(messages), failed=0)
