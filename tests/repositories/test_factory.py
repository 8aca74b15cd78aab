from unittest.mock import MagicMock, patch

from billbook.repositories.factory import get_bill_repository
from billbook.repositories.sqlalchemy import SQLAlchemyBillRepository


class TestRepoFactory:
    @patch("billbook.db.get_connection")
    def test_get_bill_repository(self, mock_conn):
        mock_conn.return_value = MagicMock()
        repo = get_bill_repository()
        assert isinstance(repo, SQLAlchemyBillRepository)
        assert repo.conn is mock_conn.return_value
