"""FastAPI dependency providers."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from phonomorph.auth import SessionError
from phonomorph.container import ApplicationContainer
from phonomorph.services import TransferOrchestrator, WalletService

security = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_wallet_service(
    container: ApplicationContainer = Depends(get_container),
) -> WalletService:
    return container.wallets


def get_transfer_orchestrator(
    container: ApplicationContainer = Depends(get_container),
) -> TransferOrchestrator:
    return container.transfers


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    container: ApplicationContainer = Depends(get_container),
) -> str:
    """Resolve the verified phone number behind the bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return container.sessions.verify(credentials.credentials)
    except SessionError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
