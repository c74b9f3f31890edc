from fastapi import APIRouter, Depends, HTTPException, Request, status

from residential_api.schemas.auth import (
    AdminLoginRequest,
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    TokenResponse,
)
from residential_api.schemas.common import MessageResponse, UserRole
from residential_api.schemas.residents import ResidentRegisterRequest
from residential_api.schemas.service_providers import ServiceProviderRegisterRequest
from residential_api.services.container import (
    auth_service,
    resident_service,
    service_provider_service,
)
from residential_api.utils.auth_dependencies import get_current_account
from residential_api.utils.logger import get_logger
from residential_api.utils.limiter import limiter, LOGIN_LIMIT

logger = get_logger(__name__)

# All authentication-related endpoints
router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
    )


def _login_response(role: str, account: dict) -> LoginResponse:
    user_id = str(account["_id"])
    token = auth_service.generate_token(user_id=user_id, role=role, email=account.get("email"))
    return LoginResponse(
        message="Login successful",
        token=token,
        user=auth_service.get_profile(role, user_id),
    )


@router.post("/admin/login", response_model=LoginResponse)
@limiter.limit(LOGIN_LIMIT)
async def admin_login(request: Request, body: AdminLoginRequest):
    """
    Admin login with username and password.
    """
    logger.info(f"[API] Admin login attempt: {body.username}")
    admin = auth_service.authenticate_admin(body.username, body.password)
    if not admin:
        raise _invalid_credentials()
    logger.info(f"[API] ✅ Admin login successful: {body.username}")
    return _login_response(UserRole.ADMIN.value, admin)


@router.post("/resident/login", response_model=LoginResponse)
@limiter.limit(LOGIN_LIMIT)
async def resident_login(request: Request, body: LoginRequest):
    """
    Resident login. The account must be ACTIVE and APPROVED.
    """
    logger.info(f"[API] Resident login attempt: {body.email}")
    resident = auth_service.authenticate_by_email(UserRole.RESIDENT.value, body.email, body.password)
    if not resident:
        raise _invalid_credentials()
    if resident.get("status") != "ACTIVE":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account inactive")
    if resident.get("approval_status") != "APPROVED":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account not approved")
    return _login_response(UserRole.RESIDENT.value, resident)


@router.post("/resident/register", status_code=status.HTTP_201_CREATED)
async def resident_register(body: ResidentRegisterRequest):
    """
    Self-registration for residents. The account waits for admin approval.
    """
    logger.info(f"[API] Resident registration: {body.email} ({body.apartment})")
    resident = resident_service.register(body.model_dump(exclude_none=True))
    return {
        "message": "Registration submitted. Your account is pending admin approval.",
        "resident": resident,
    }


@router.post("/service-provider/login", response_model=LoginResponse)
@limiter.limit(LOGIN_LIMIT)
async def service_provider_login(request: Request, body: LoginRequest):
    logger.info(f"[API] Service provider login attempt: {body.email}")
    provider = auth_service.authenticate_by_email(UserRole.SERVICE_PROVIDER.value, body.email, body.password)
    if not provider:
        raise _invalid_credentials()
    if provider.get("status") != "ACTIVE":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account inactive")
    return _login_response(UserRole.SERVICE_PROVIDER.value, provider)


@router.post("/service-provider/register", status_code=status.HTTP_201_CREATED)
async def service_provider_register(body: ServiceProviderRegisterRequest):
    logger.info(f"[API] Service provider registration: {body.username} ({body.service_category})")
    provider = service_provider_service.register(body.model_dump(exclude_none=True))
    return {
        "message": "Registration submitted. Your account is pending admin approval.",
        "service_provider": provider,
    }


@router.post("/employee/login", response_model=LoginResponse)
@limiter.limit(LOGIN_LIMIT)
async def employee_login(request: Request, body: LoginRequest):
    """
    Employee login; only employees created with a password can sign in.
    """
    logger.info(f"[API] Employee login attempt: {body.email}")
    employee = auth_service.authenticate_by_email(UserRole.EMPLOYEE.value, body.email, body.password)
    if not employee:
        raise _invalid_credentials()
    if employee.get("status") != "ACTIVE":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account inactive")
    return _login_response(UserRole.EMPLOYEE.value, employee)


@router.get("/me", response_model=CurrentUserResponse)
async def me(current_account: dict = Depends(get_current_account)):
    """Current caller's profile. No account status check."""
    profile = auth_service.get_profile(current_account["role"], current_account["id"])
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return CurrentUserResponse(user=profile)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(current_account: dict = Depends(get_current_account)):
    token = auth_service.generate_token(
        user_id=current_account["id"],
        role=current_account["role"],
        email=current_account.get("email"),
    )
    return TokenResponse(message="Token refreshed", token=token)


@router.post("/logout", response_model=MessageResponse)
async def logout():
    """Tokens are stateless; the client discards its copy."""
    return MessageResponse(message="Logged out successfully")
