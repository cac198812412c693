from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse

from marketplace.core.rate_limiter import limit_auth
from marketplace.domain.records import OnboardingProfileDraft
from marketplace.routers.deps import get_account_service
from marketplace.services.account_service import (
    AccountExistsError,
    AccountService,
    AuthError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    RegistrationError,
    RemoteCallError,
)
from marketplace.services.session_service import clear_session_cookie, session_token, set_session_cookie

router = APIRouter(prefix="/auth", tags=["auth"])

_STATUS = {
    RegistrationError: 400,
    AccountExistsError: 409,
    InvalidCredentialsError: 401,
    NotAuthenticatedError: 401,
    RemoteCallError: 502,
}


def _error_response(err: AuthError) -> JSONResponse:
    return JSONResponse({"ok": False, "message": err.message}, status_code=_STATUS.get(type(err), 400))


@router.post("/register")
def register(
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    country: str = Form(""),
    role: str = Form(""),
    svc: AccountService = Depends(get_account_service),
):
    limit_auth(request, "register")
    try:
        result = svc.sign_up(email, password, first_name=first_name, last_name=last_name, country=country, role=role)
    except AuthError as exc:
        return _error_response(exc)
    response = JSONResponse(
        {"ok": True, "user_id": result.user_id, "role": result.role.value, "next": result.next_step},
        status_code=201,
    )
    set_session_cookie(response, result.session_token, svc.settings)
    return response


@router.post("/login")
def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    svc: AccountService = Depends(get_account_service),
):
    limit_auth(request, "login")
    try:
        result = svc.sign_in(email, password)
    except AuthError as exc:
        return _error_response(exc)
    response = JSONResponse(
        {"ok": True, "user_id": result.user_id, "role": result.role.value if result.role else None}
    )
    set_session_cookie(response, result.session_token, svc.settings)
    return response


@router.post("/logout")
def logout(request: Request, svc: AccountService = Depends(get_account_service)):
    try:
        svc.sign_out(session_token(request))
    except AuthError as exc:
        return _error_response(exc)
    response = JSONResponse({"ok": True})
    clear_session_cookie(response)
    return response


@router.post("/onboarding")
def onboarding(request: Request, details: OnboardingProfileDraft, svc: AccountService = Depends(get_account_service)):
    limit_auth(request, "onboarding")
    if not details.full_name.strip():
        return JSONResponse({"ok": False, "message": "Full name is required"}, status_code=422)
    try:
        result = svc.complete_onboarding(session_token(request), details)
    except AuthError as exc:
        return _error_response(exc)
    return {"ok": True, "user_id": result.user_id, "saved": result.saved}
