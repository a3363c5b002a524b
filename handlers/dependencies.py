from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from database.database import get_session
from models.user import User
from services.user_service import get_user_by_id
from utils.errors import Unauthenticated
from utils.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)

async def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session)
) -> User:
    if not creds:
        raise Unauthenticated()
    payload = decode_access_token(creds.credentials)
    try:
        user_id = int(payload.get("sub", ""))
    except ValueError:
        raise Unauthenticated("Invalid token subject")

    user = await get_user_by_id(session, user_id)
    if not user:
        raise Unauthenticated("User no longer exists")
    return user
