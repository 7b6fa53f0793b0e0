"""API Dependencies - Authentication and service wiring"""
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from application.services import ReservationService, BillingService
from domain.auth import User, UserInDB
from domain.enums import StaffRole
from infrastructure.security import SECRET_KEY, ALGORITHM, get_password_hash
from api.schemas import TokenData

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")

# Staff accounts. In production these come from the users table.
_fake_users_db = {
    "admin": {
        "username": "admin",
        "full_name": "Admin User",
        "email": "admin@example.com",
        "plain_password": "admin123",
        "role": StaffRole.ADMIN,
        "disabled": False,
        "user_id": "123e4567-e89b-12d3-a456-426614174000"
    },
    "anfitrion": {
        "username": "anfitrion",
        "full_name": "Carlos Rodríguez",
        "email": "anfitrion@example.com",
        "plain_password": "host123",
        "role": StaffRole.HOST,
        "disabled": False,
        "user_id": "123e4567-e89b-12d3-a456-426614174001"
    },
    "porteria": {
        "username": "porteria",
        "full_name": "Roberto Portillo",
        "email": "porteria@example.com",
        "plain_password": "gate123",
        "role": StaffRole.GATEKEEPER,
        "disabled": False,
        "user_id": "123e4567-e89b-12d3-a456-426614174002"
    },
}

fake_users_db = _fake_users_db

# Cache for hashed passwords
_password_hash_cache = {}

def _get_hashed_password(username: str) -> str:
    """Lazily hash passwords on first access"""
    if username not in _password_hash_cache:
        user = _fake_users_db.get(username)
        if user and "plain_password" in user:
            _password_hash_cache[username] = get_password_hash(user["plain_password"])
    return _password_hash_cache.get(username, "")

def get_user(db, username: str):
    if username in db:
        user_dict = db[username].copy()
        if "plain_password" in user_dict:
            user_dict["hashed_password"] = _get_hashed_password(username)
            del user_dict["plain_password"]
        return UserInDB(**user_dict)
    return None

async def get_current_user(token: str = Depends(oauth2_scheme)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception
        token_data = TokenData(username=username)
    except JWTError:
        raise credentials_exception

    user = get_user(_fake_users_db, username=token_data.username)
    if user is None:
        raise credentials_exception
    return user

async def get_current_active_user(current_user: User = Depends(get_current_user)):
    if current_user.disabled:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user

def require_roles(*roles: StaffRole):
    """Allow only staff with one of the given roles; admins always pass"""
    async def checker(current_user: User = Depends(get_current_active_user)):
        if current_user.role != StaffRole.ADMIN and current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role {current_user.role.value} is not allowed to perform this action"
            )
        return current_user
    return checker

def get_reservation_service(request: Request) -> ReservationService:
    return ReservationService(request.app.state.reservation_repo)

def get_billing_service(request: Request) -> BillingService:
    return BillingService(request.app.state.billing_repo)
