from __future__ import annotations

from pathlib import Path

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from .sessions import Session


class ViewRenderer:
    """Render the HTML pages.

    Every render consumes the pending flash message, which is what makes flash
    messages one-shot: shown on the next rendered page, then gone.
    """

    def __init__(self, templates_dir: Path):
        self.templates = Jinja2Templates(directory=str(templates_dir))

    def render(
        self,
        request: Request,
        session: Session,
        template: str,
        status_code: int = 200,
        **context,
    ) -> HTMLResponse:
        message = session.take_message()
        context.setdefault("message", message)
        context.setdefault("username", session.get_username())
        return self.templates.TemplateResponse(
            request,
            template,
            context,
            status_code=status_code,
        )
