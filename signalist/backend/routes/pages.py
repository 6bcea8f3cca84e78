from __future__ import annotations

import html

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse

from auth import SessionLookup
from models import Session, SessionUser

SIGN_IN_PATH = "/sign-in"

router = APIRouter(tags=["pages"])


def get_session_store(request: Request) -> SessionLookup:
    return request.app.state.session_store


def require_session(request: Request, store: SessionLookup = Depends(get_session_store)) -> Session:
    """Resolve the signed-in session or redirect to the sign-in page."""
    session = store.get_session(request.headers)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
            headers={"Location": SIGN_IN_PATH},
        )
    return session


def _layout(user: SessionUser, title: str, body: str) -> str:
    return (
        "<!DOCTYPE html><html><head><title>%s | Signalist</title></head>"
        '<body><main class="min-h-screen text-gray-400">'
        '<header data-user-id="%s"><span>%s</span> <span>%s</span></header>'
        '<div class="container py-10">%s</div>'
        "</main></body></html>"
        % (
            html.escape(title),
            html.escape(user.id),
            html.escape(user.name),
            html.escape(user.email),
            body,
        )
    )


@router.get("/", response_class=HTMLResponse)
def dashboard(session: Session = Depends(require_session)) -> str:
    return _layout(session.user, "Dashboard", "<h1>Market overview</h1>")


@router.get("/watchlist", response_class=HTMLResponse)
def watchlist_page(session: Session = Depends(require_session)) -> str:
    return _layout(session.user, "Watchlist", "<h1>Your watchlist</h1>")


@router.get(SIGN_IN_PATH, response_class=HTMLResponse)
def sign_in() -> str:
    return (
        "<!DOCTYPE html><html><head><title>Sign in | Signalist</title></head>"
        "<body><h1>Sign in to Signalist</h1></body></html>"
    )
