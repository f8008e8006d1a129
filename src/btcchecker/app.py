# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from btcchecker.auth.gate import SessionGate
from btcchecker.auth.session import CookieSessions, Session
from btcchecker.auth.store import CredentialStore
from btcchecker.config import Config
from btcchecker.errors import CheckerError
from btcchecker.observability import install_request_middleware
from btcchecker.rates import RateClient

logger = logging.getLogger(__name__)


class Credentials(BaseModel):
    email: str
    password: str


def build_store(config: Config) -> CredentialStore:
    return CredentialStore(config.database_path, rounds=config.hash_rounds)


def create_app(
    config: Config,
    *,
    store: Optional[CredentialStore] = None,
    rates: Optional[RateClient] = None,
) -> FastAPI:
    """Wire the store, session cookies and rate client into a FastAPI app.

    The store is built (and its file read) here, so a broken backing file
    stops the service at startup instead of on the first request.
    """
    app = FastAPI(title="btcchecker")
    app.state.config = config
    app.state.store = store if store is not None else build_store(config)
    app.state.gate = SessionGate(app.state.store)
    app.state.sessions = CookieSessions(
        config.session_key,
        cookie_name=config.session_cookie_name,
        max_age=config.session_max_age,
        secure=config.session_cookie_secure,
    )
    if rates is None:
        rates = RateClient(
            config.rate_api_url,
            currency=config.rate_currency,
            timeout=config.rate_timeout,
        )
    app.state.rates = rates

    install_request_middleware(app)
    register_error_handlers(app)
    _register_routes(app)
    return app


# ------------------ Dependencies ------------------


def get_store(request: Request) -> CredentialStore:
    return request.app.state.store


def get_gate(request: Request) -> SessionGate:
    return request.app.state.gate


def get_session(request: Request) -> Session:
    return request.app.state.sessions.get(request)


def require_user(
    request: Request,
    session: Session = Depends(get_session),
    gate: SessionGate = Depends(get_gate),
) -> str:
    email = gate.require_authenticated(session)
    request.state.user_email = email
    return email


def _respond(request: Request, status_code: int, data, session: Optional[Session] = None) -> JSONResponse:
    resp = JSONResponse(status_code=status_code, content=data)
    if session is not None and session.modified:
        request.app.state.sessions.save(resp, session)
    return resp


# ------------------ Routes ------------------


def _register_routes(app: FastAPI) -> None:
    @app.post("/user/create")
    def user_create(
        request: Request,
        body: Credentials,
        store: CredentialStore = Depends(get_store),
    ):
        store.add_user(body.email, body.password)
        return _respond(request, status.HTTP_201_CREATED, "Success")

    @app.post("/user/login")
    def user_login(
        request: Request,
        body: Credentials,
        store: CredentialStore = Depends(get_store),
        gate: SessionGate = Depends(get_gate),
        session: Session = Depends(get_session),
    ):
        store.authenticate(body.email, body.password)
        gate.establish_session(session, body.email)
        logger.info("user %s logged in", body.email)
        return _respond(request, status.HTTP_200_OK, {"email": body.email}, session)

    @app.post("/user/logout")
    def user_logout(
        request: Request,
        gate: SessionGate = Depends(get_gate),
        session: Session = Depends(get_session),
    ):
        gate.end_session(session)
        return _respond(request, status.HTTP_200_OK, None, session)

    @app.get("/btcRate")
    def btc_rate(request: Request, email: str = Depends(require_user)):
        rate = request.app.state.rates.current()
        return _respond(
            request,
            status.HTTP_200_OK,
            {"currency": rate.currency.upper(), "rate": rate.rate, "email": email},
        )


# ------------------ Error handlers ------------------


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CheckerError)
    async def checker_error_handler(request: Request, exc: CheckerError):
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            "%s on %s: %s",
            exc.code,
            request.url.path,
            exc.message,
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("malformed request on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": {
                    "code": "BAD_REQUEST",
                    "message": "Invalid request body",
                    "details": [
                        {
                            "field": ".".join(str(loc) for loc in e["loc"]),
                            "message": e["msg"],
                        }
                        for e in exc.errors()
                    ],
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error("unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}},
        )
