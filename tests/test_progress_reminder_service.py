from __future__ import annotations

import unittest

from bakery_ops.services.collaborators import NotifiableWorker
from bakery_ops.services.progress_reminder_service import send_progress_reminders
from tests.fakes import InMemoryShiftDirectory, RecordingDispatcher


class ProgressReminderTests(unittest.IsolatedAsyncioTestCase):
    async def test_no_open_shifts(self) -> None:
        notifier = RecordingDispatcher()
        report = await send_progress_reminders(shifts=InMemoryShiftDirectory([]), notifier=notifier)
        self.assertEqual(report.message, 'No open shifts')
        self.assertEqual(notifier.batches, [])

    async def test_each_open_shift_worker_is_reminded_once(self) -> None:
        notifier = RecordingDispatcher()
        shifts = InMemoryShiftDirectory(
            [
                NotifiableWorker(id=1, push_token='token-1'),
                NotifiableWorker(id=2, push_token='token-2'),
                NotifiableWorker(id=1, push_token='token-1'),
            ]
        )

        report = await send_progress_reminders(shifts=shifts, notifier=notifier)

        self.assertEqual(report.recipients, 2)
        self.assertEqual(report.message, 'Sent notifications to 2 users')
        self.assertEqual([m.data for m in notifier.batches[0]], [{'screen': 'progress'}] * 2)


if __name__ == '__main__':
    unittest.main()
