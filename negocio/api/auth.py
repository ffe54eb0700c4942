"""
Sign-in / sign-out pages
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from negocio.api.deps import SESSION_USER_KEY, get_auth_service, get_current_user
from negocio.api.templating import render
from negocio.schemas.user import SessionUser
from negocio.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/sign-in", response_class=HTMLResponse, summary="Sign-in page")
def sign_in_page(request: Request, user: Optional[SessionUser] = Depends(get_current_user)):
    if user:
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    return render(request, "sign_in.html", {"email": "", "error": None})


@router.post("/sign-in", response_class=HTMLResponse, summary="Sign in")
def sign_in(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    auth: AuthService = Depends(get_auth_service)
):
    user = auth.authenticate(email, password)
    if not user:
        return render(
            request,
            "sign_in.html",
            {"email": email, "error": "Invalid email or password"},
            status_code=status.HTTP_401_UNAUTHORIZED
        )
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id
    logger.info(f"User {user.email} signed in")
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/sign-out", summary="Sign out")
def sign_out(request: Request):
    request.session.clear()
    return RedirectResponse("/sign-in", status_code=status.HTTP_303_SEE_OTHER)
