from __future__ import annotations

import json
import unittest
from unittest.mock import MagicMock, patch
from urllib.error import URLError

from bakery_ops.services.collaborators import NotifiableWorker, PushMessage
from bakery_ops.services.push_service import (
    RECENT_MESSAGE_LIMIT,
    ExpoPushDispatcher,
    LoggingPushDispatcher,
    build_messages,
    chunk_messages,
)


def _messages(count: int) -> list[PushMessage]:
    return [PushMessage(to=f'token-{i}', title='t', body='b') for i in range(count)]


class BuildMessagesTests(unittest.TestCase):
    def test_skips_missing_and_duplicate_tokens(self) -> None:
        recipients = [
            NotifiableWorker(id=1, push_token='a'),
            NotifiableWorker(id=2, push_token=''),
            NotifiableWorker(id=3, push_token='a'),
            NotifiableWorker(id=4, push_token='b'),
        ]
        messages = build_messages(recipients, 'Title', 'Body', {'screen': 'inventory'})
        self.assertEqual([m.to for m in messages], ['a', 'b'])
        self.assertEqual(
            messages[0].to_payload(),
            {
                'to': 'a',
                'title': 'Title',
                'body': 'Body',
                'data': {'screen': 'inventory'},
                'sound': 'default',
                'priority': 'high',
            },
        )

    def test_chunking(self) -> None:
        self.assertEqual([len(chunk) for chunk in chunk_messages(_messages(250), 100)], [100, 100, 50])
        self.assertEqual(chunk_messages([], 100), [])
        with self.assertRaises(ValueError):
            chunk_messages(_messages(1), 0)


class ExpoPushDispatcherTests(unittest.IsolatedAsyncioTestCase):
    async def test_empty_message_list_sends_nothing(self) -> None:
        dispatcher = ExpoPushDispatcher(push_url='https://push.test/send', batch_size=100)
        with patch.object(dispatcher, '_post_batch') as post_mock:
            outcome = await dispatcher.send_batch([])
        post_mock.assert_not_called()
        self.assertEqual((outcome.sent, outcome.failed), (0, 0))

    async def test_batches_are_sent_and_failures_counted(self) -> None:
        dispatcher = ExpoPushDispatcher(push_url='https://push.test/send', batch_size=100)
        sizes: list[int] = []

        def fake_post(batch):
            sizes.append(len(batch))
            if len(batch) == 50:
                raise RuntimeError('Expo push network error: timed out')

        with patch.object(dispatcher, '_post_batch', side_effect=fake_post):
            with self.assertLogs('bakery_ops.services.push_service', level='WARNING'):
                outcome = await dispatcher.send_batch(_messages(250))

        self.assertEqual(sorted(sizes), [50, 100, 100])
        self.assertEqual(outcome.sent, 200)
        self.assertEqual(outcome.failed, 50)

    @patch('bakery_ops.services.push_service.urlopen')
    async def test_wire_format(self, urlopen_mock) -> None:
        response = MagicMock()
        response.read.return_value = b'{"data": []}'
        urlopen_mock.return_value.__enter__.return_value = response
        dispatcher = ExpoPushDispatcher(push_url='https://push.test/send', batch_size=100, timeout_seconds=5)

        outcome = await dispatcher.send_batch(_messages(2))

        self.assertEqual(outcome.sent, 2)
        req = urlopen_mock.call_args.args[0]
        self.assertEqual(req.full_url, 'https://push.test/send')
        self.assertEqual(req.get_method(), 'POST')
        self.assertEqual(req.get_header('Content-type'), 'application/json')
        self.assertEqual(urlopen_mock.call_args.kwargs['timeout'], 5)
        body = json.loads(req.data.decode('utf-8'))
        self.assertEqual([item['to'] for item in body], ['token-0', 'token-1'])

    @patch('bakery_ops.services.push_service.urlopen', side_effect=URLError('unreachable'))
    async def test_network_error_is_counted_not_raised(self, _urlopen_mock) -> None:
        dispatcher = ExpoPushDispatcher(push_url='https://push.test/send', batch_size=100)
        with self.assertLogs('bakery_ops.services.push_service', level='WARNING'):
            outcome = await dispatcher.send_batch(_messages(3))
        self.assertEqual((outcome.sent, outcome.failed), (0, 3))


class LoggingPushDispatcherTests(unittest.IsolatedAsyncioTestCase):
    async def test_records_messages(self) -> None:
        dispatcher = LoggingPushDispatcher()
        outcome = await dispatcher.send_batch(_messages(2))
        self.assertEqual(outcome.sent, 2)
        self.assertEqual(len(dispatcher.sent_messages), 2)

    async def test_keeps_only_recent_messages(self) -> None:
        dispatcher = LoggingPushDispatcher()
        await dispatcher.send_batch(_messages(RECENT_MESSAGE_LIMIT + 5))
        self.assertEqual(len(dispatcher.sent_messages), RECENT_MESSAGE_LIMIT)
        self.assertEqual(dispatcher.sent_messages[0].to, 'token-5')


if __name__ == '__main__':
    unittest.main()
