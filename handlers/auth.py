from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger
from database.database import get_session
from handlers.dependencies import get_current_user
from models.user import User
from schemas.user import LoginRequest, TokenResponse, UserOut
from services.user_service import get_or_create_user
from utils.security import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])

# подключается в create_app только при DEV_LOGIN_ENABLED
dev_login_router = APIRouter(prefix="/auth", tags=["auth"])

@dev_login_router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, session: AsyncSession = Depends(get_session)):
    """
    Вход для разработки: создает пользователя по email и выдает токен без проверки пароля.
    Роль назначается только при первом входе.
    """
    user = await get_or_create_user(session, body.email, body.name, body.role, body.avatar_url)
    logger.info(f"Вход пользователя {user.id} ({user.role.value})")
    return TokenResponse(token=create_access_token(user), user=UserOut.model_validate(user))

@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)
