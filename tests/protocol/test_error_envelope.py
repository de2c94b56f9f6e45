from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from src.engine.position import IllegalMoveError
from src.protocol.http.app import create_app


def test_error_envelope_for_http_exception() -> None:
    app: FastAPI = create_app()

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"]


def test_illegal_move_error_maps_to_bad_request() -> None:
    app: FastAPI = create_app()

    @app.get("/illegal")
    def illegal():  # type: ignore[no-redef]
        raise IllegalMoveError("illegal move: e2e5")

    r = TestClient(app).get("/illegal")
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "illegal move: e2e5"


def test_unhandled_exception_is_internal_error() -> None:
    app: FastAPI = create_app()

    @app.get("/crash")
    def crash():  # type: ignore[no-redef]
        raise RuntimeError("kaboom")

    r = TestClient(app, raise_server_exceptions=False).get("/crash")
    assert r.status_code == 500
    err = r.json()["error"]
    assert err["code"] == "internal_error"
    assert err["type"] == "server_error"
