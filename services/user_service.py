from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from loguru import logger
from models.user import User, UserRole
from utils.errors import NotFound, ValidationError
from utils.geo import Location
from utils.validators import validate_coordinates
from typing import Optional, Dict, Any

async def get_or_create_user(
    session: AsyncSession,
    email: str,
    name: Optional[str] = None,
    role: UserRole = UserRole.USER,
    avatar_url: Optional[str] = None
) -> User:
    """
    Возвращает пользователя по email или создает нового.
    Роль задается только при создании и в дальнейшем не меняется.
    """
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user:
        user = User(
            email=email,
            name=name,
            avatar_url=avatar_url,
            role=role
        )
        session.add(user)
        try:
            await session.commit()
            await session.refresh(user)
            logger.info(f"Создан пользователь {user.id} ({email}) с ролью {role.value}")
        except IntegrityError:
            await session.rollback()
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
            if not user:
                raise
    else:
        if name and user.name != name:
            user.name = name
        if avatar_url and user.avatar_url != avatar_url:
            user.avatar_url = avatar_url
        await session.commit()

    return user

async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()

async def update_profile(
    session: AsyncSession,
    user_id: int,
    phone: Optional[str] = None,
    address: Optional[Dict[str, Any]] = None,
    location: Optional[Location] = None
) -> User:
    """
    Обновляет контактные данные пользователя: телефон, адрес и точку на карте.
    Пустые значения не затирают сохраненные.
    """
    user = await get_user_by_id(session, user_id)
    if not user:
        raise NotFound("User not found")

    if location is not None:
        is_valid, error_msg = validate_coordinates(location.lat, location.lng)
        if not is_valid:
            raise ValidationError(error_msg)

    if phone:
        user.phone = phone
    if address:
        for key in ("flat", "area", "locality", "pincode"):
            if key in address:
                setattr(user, f"address_{key}", address[key])
    if location is not None:
        user.set_location(location)

    await session.commit()
    await session.refresh(user)
    return user
