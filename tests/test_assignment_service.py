from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from bakery_ops.models import CompanyRole
from bakery_ops.services.assignment_service import resolve_responsible_worker
from bakery_ops.services.collaborators import WorkerRef


class ResolveResponsibleWorkerTests(unittest.TestCase):
    def test_first_baker_in_assignment_order(self) -> None:
        directory = MagicMock()
        directory.list_workers_by_store_and_role.return_value = [WorkerRef(id=7), WorkerRef(id=3)]

        self.assertEqual(resolve_responsible_worker(directory, 5), 7)
        directory.list_workers_by_store_and_role.assert_called_once_with(5, CompanyRole.BAKER)

    def test_no_baker(self) -> None:
        directory = MagicMock()
        directory.list_workers_by_store_and_role.return_value = []
        self.assertIsNone(resolve_responsible_worker(directory, 5))


if __name__ == '__main__':
    unittest.main()
