"""
API Key Authentication
Header-based authentication; the caller's identity arrives in X-User-Id
(issued by the upstream auth provider) and scopes every journal query
"""
from fastapi import HTTPException, Header, status
from tradejournal_api.config import settings


async def validate_api_key(
    x_api_key: str = Header(
        ..., 
        alias="X-API-Key",
        description="API Key for authentication"
    )
) -> str:
    """
    Validate API Key from X-API-Key header
    
    Raises:
        HTTPException: If API key is invalid
    """
    if x_api_key not in settings.API_KEYS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key",
            headers={"WWW-Authenticate": "ApiKey"},
        )
    return x_api_key


async def get_user_id(
    x_user_id: str = Header(
        ...,
        alias="X-User-Id",
        description="Authenticated user identifier"
    )
) -> str:
    """
    Read the user identity supplied by the auth provider
    """
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    return user_id
