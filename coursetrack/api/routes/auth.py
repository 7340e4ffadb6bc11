import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from coursetrack.adapters.auth.crypto import Argon2JWTAuthAdapter
from coursetrack.adapters.sqlite.repos import SQLitePrincipalRepo
from coursetrack.api.deps import (
    get_auth_adapter,
    get_principal_repo,
    get_progress_service,
    get_rate_limiter,
    get_rules,
)
from coursetrack.api.schemas import LoginRequest, LoginResponse
from coursetrack.app_shell.rate_limit import RateLimiter
from coursetrack.components.progress import (
    ProgressService,
    RecordCheckInInput,
    run_record_check_in,
)
from coursetrack.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(
    req: LoginRequest,
    request: Request,
    principal_repo: SQLitePrincipalRepo = Depends(get_principal_repo),
    auth_adapter: Argon2JWTAuthAdapter = Depends(get_auth_adapter),
    service: ProgressService = Depends(get_progress_service),
    limiter: RateLimiter = Depends(get_rate_limiter),
    rules: Rules = Depends(get_rules),
) -> LoginResponse:
    """
    Authenticate and return a bearer token plus the learner record.

    A successful login counts as today's check-in.
    """
    client_key = request.client.host if request.client else "unknown"
    if not limiter.check_login(client_key):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts",
            headers={"Retry-After": str(limiter.retry_after(client_key))},
        )

    principal = principal_repo.get_by_username(req.username)
    if not principal or not auth_adapter.verify_password(req.password, principal.password_hash):
        logger.info("Failed login for %s", req.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = run_record_check_in(RecordCheckInInput(principal.id), service)
    if not result.success or result.record is None:
        raise HTTPException(status_code=404, detail="Principal not found")

    token = auth_adapter.create_token(
        principal.id, rules.auth.token_ttl_minutes, role=principal.role
    )
    return LoginResponse(access_token=token, token_type="bearer", user=result.record)
