"""Tests for request id propagation into log records (main.py)"""
import logging

from fastapi import APIRouter

from main import app, RequestIdFilter, request_id_var


def _record():
    return logging.LogRecord("aula", logging.INFO, __file__, 1, "hello", None, None)


class TestRequestIdFilter:
    def test_record_carries_current_request_id(self):
        token = request_id_var.set("abc123")
        try:
            record = _record()
            assert RequestIdFilter().filter(record) is True
        finally:
            request_id_var.reset(token)

        assert record.request_id == "abc123"

    def test_outside_a_request_id_is_none(self):
        record = _record()

        RequestIdFilter().filter(record)

        assert record.request_id is None


class TestRequestIdMiddleware:
    def test_echoes_incoming_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    def test_generates_id_when_absent(self, client):
        response = client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 8

    def test_id_is_visible_while_handling_the_request(self, client):
        seen = []
        router = APIRouter()

        @router.get("/_whoami")
        def capture():
            seen.append(request_id_var.get())
            return {}

        app.include_router(router)
        try:
            client.get("/_whoami", headers={"X-Request-ID": "req-7"})
        finally:
            app.router.routes[:] = [
                r for r in app.router.routes if getattr(r, "path", None) != "/_whoami"
            ]

        assert seen == ["req-7"]
        assert request_id_var.get() is None
