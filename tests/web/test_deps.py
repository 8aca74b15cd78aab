"""Tests for web middleware and deps edge cases."""
import asyncio
from unittest.mock import MagicMock

from billbook.services.bill_service import BillService
from web.deps import DBConnectionMiddleware, get_bill_service


class TestDBConnectionMiddlewareNonHTTP:
    def test_non_http_scope_passes_through(self):
        called = False

        async def inner_app(scope, receive, send):
            nonlocal called
            called = True

        middleware = DBConnectionMiddleware(inner_app)
        scope = {"type": "websocket"}

        asyncio.run(middleware(scope, None, None))
        assert called


class TestDBConnectionMiddleware:
    def test_connection_closed_after_request(self, client, monkeypatch):
        import web.deps as deps_module

        mock_engine = MagicMock()
        mock_conn = mock_engine.connect.return_value
        mock_conn.execute.return_value.mappings.return_value.fetchall.return_value = []
        monkeypatch.setattr(deps_module, "get_engine", lambda: mock_engine)

        response = client.get("/api/bills/getAllBills")

        assert response.status_code == 200
        mock_engine.connect.assert_called_once()
        mock_conn.close.assert_called_once()

    def test_no_connection_when_unused(self, client, monkeypatch):
        import web.deps as deps_module

        mock_engine = MagicMock()
        monkeypatch.setattr(deps_module, "get_engine", lambda: mock_engine)

        client.get("/api/bills/nothing-here")

        mock_engine.connect.assert_not_called()


class TestGetBillService:
    def test_reuses_request_connection(self):
        request = MagicMock()
        request.state.db_conn = None

        first = get_bill_service(request)
        second = get_bill_service(request)

        assert isinstance(first, BillService)
        assert first.bill_repo.conn is second.bill_repo.conn
