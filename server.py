from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import RedirectResponse, Response
from starlette.middleware.sessions import SessionMiddleware

from cms_backend.config import TEMPLATES_DIR, Settings, load_settings
from cms_backend.credentials import CredentialStore
from cms_backend.documents import DocumentKind, DocumentStore
from cms_backend.errors import AuthRequired, DocumentNotFound, InvalidDocumentName
from cms_backend.logging_setup import configure_logging
from cms_backend.markdown_render import render_markdown
from cms_backend.sessions import Session, get_session, require_user
from cms_backend.views import ViewRenderer


logger = logging.getLogger("mdcms.server")


def _redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=302)


def _store(request: Request) -> DocumentStore:
    return request.app.state.store


def _credentials(request: Request) -> CredentialStore:
    return request.app.state.credentials


def _views(request: Request) -> ViewRenderer:
    return request.app.state.views


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app. Paths and secrets come only from settings."""
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="mdcms", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.state.store = DocumentStore(settings.data_dir)
    app.state.credentials = CredentialStore(settings.users_path)
    app.state.views = ViewRenderer(TEMPLATES_DIR)

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=False,
    )

    @app.middleware("http")
    async def _no_store(request: Request, call_next):
        response = await call_next(request)
        # Pages carry per-session flash messages and sign-in state.
        response.headers.setdefault("Cache-Control", "no-store")
        return response

    @app.exception_handler(AuthRequired)
    def _auth_required(request: Request, exc: AuthRequired) -> Response:
        logger.debug("Signed-out request to %s %s", request.method, request.url.path)
        get_session(request).set_message(str(exc))
        return _redirect_home()

    @app.exception_handler(DocumentNotFound)
    def _document_not_found(request: Request, exc: DocumentNotFound) -> Response:
        get_session(request).set_message(str(exc))
        return _redirect_home()

    _register_routes(app)
    logger.info("mdcms ready (env=%s, data=%s)", settings.environment, settings.data_dir)
    return app


def _register_routes(app: FastAPI) -> None:
    # Fixed paths first: /{filename} would otherwise swallow them.

    @app.get("/")
    def index(request: Request, session: Session = Depends(get_session)) -> Response:
        return _views(request).render(request, session, "index.html", files=_store(request).list())

    @app.get("/new")
    def new_document(
        request: Request,
        session: Session = Depends(get_session),
        _user: str = Depends(require_user),
    ) -> Response:
        return _views(request).render(request, session, "new.html")

    @app.post("/create")
    def create_document(
        request: Request,
        filename: str = Form(""),
        session: Session = Depends(get_session),
        _user: str = Depends(require_user),
    ) -> Response:
        try:
            name = _store(request).create_empty(filename)
        except InvalidDocumentName as e:
            session.set_message(str(e))
            return _views(request).render(
                request, session, "new.html", status_code=422, filename=filename.strip()
            )
        session.set_message(f"{name} has been created.")
        return _redirect_home()

    @app.get("/users/signin")
    def signin_form(request: Request, session: Session = Depends(get_session)) -> Response:
        return _views(request).render(request, session, "signin.html", form_username="")

    @app.post("/users/signin")
    def signin(
        request: Request,
        username: str = Form(""),
        password: str = Form(""),
        session: Session = Depends(get_session),
    ) -> Response:
        if _credentials(request).verify(username, password):
            session.set_username(username)
            session.set_message("Welcome!")
            logger.info("%s signed in", username)
            return _redirect_home()

        session.set_message("Invalid credentials")
        return _views(request).render(
            request, session, "signin.html", status_code=422, form_username=username
        )

    @app.post("/users/signout")
    def signout(session: Session = Depends(get_session)) -> Response:
        username = session.get_username()
        session.clear_username()
        session.set_message("You have been signed out.")
        if username:
            logger.info("%s signed out", username)
        return _redirect_home()

    @app.get("/{filename}")
    def view_document(request: Request, filename: str, session: Session = Depends(get_session)) -> Response:
        doc = _store(request).read(filename)
        if doc.kind is DocumentKind.MARKDOWN:
            return _views(request).render(
                request, session, "document.html", name=doc.name, body=render_markdown(doc.text)
            )
        return Response(
            content=doc.content,
            media_type="text/plain",
            headers={"X-Content-Type-Options": "nosniff"},
        )

    @app.get("/{filename}/edit")
    def edit_document(
        request: Request,
        filename: str,
        session: Session = Depends(get_session),
        _user: str = Depends(require_user),
    ) -> Response:
        doc = _store(request).read(filename)
        return _views(request).render(request, session, "edit.html", name=doc.name, content=doc.text)

    @app.post("/{filename}")
    def update_document(
        request: Request,
        filename: str,
        content: str = Form(""),
        session: Session = Depends(get_session),
        _user: str = Depends(require_user),
    ) -> Response:
        try:
            _store(request).write(filename, content.encode("utf-8"))
        except InvalidDocumentName:
            raise DocumentNotFound(filename)
        session.set_message(f"{filename} has been updated.")
        return _redirect_home()

    @app.post("/{filename}/delete")
    def delete_document(
        request: Request,
        filename: str,
        session: Session = Depends(get_session),
        _user: str = Depends(require_user),
    ) -> Response:
        _store(request).delete(filename)
        session.set_message(f"{filename} has been deleted.")
        return _redirect_home()


if __name__ == "__main__":
    # Convenience: python server.py
    import uvicorn

    port = int(os.environ.get("PORT", "4567"))
    uvicorn.run("server:create_app", factory=True, host="127.0.0.1", port=port, reload=False)
