"""
Authentication Service

Handles JWT-based authentication for admins, residents, service providers
and employees.
"""

from typing import Optional, Dict, Any
from datetime import timedelta

import jwt
import bcrypt

from residential_api.config import Config
from residential_api.db.mongo import get_database, id_query
from residential_api.schemas.common import UserRole
from residential_api.utils.logger import get_logger
from residential_api.utils.datetime_utils import get_now_utc

logger = get_logger(__name__)

JWT_ALGORITHM = "HS256"

# Collection holding each role's accounts
ROLE_COLLECTIONS = {
    UserRole.ADMIN.value: "admins",
    UserRole.RESIDENT.value: "residents",
    UserRole.SERVICE_PROVIDER.value: "service_providers",
    UserRole.EMPLOYEE.value: "employees",
}

# Fields returned by GET /api/auth/me, per role
PROFILE_FIELDS = {
    UserRole.ADMIN.value: ("username", "email", "name"),
    UserRole.RESIDENT.value: (
        "name", "email", "apartment", "status", "approval_status", "family_members", "phone",
    ),
    UserRole.SERVICE_PROVIDER.value: (
        "name", "email", "username", "status", "service_category", "rating", "completed_jobs",
    ),
    UserRole.EMPLOYEE.value: (
        "employee_id", "name", "email", "designation", "department", "status",
    ),
}


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        logger.error(f"[AuthService] Password verification error: {str(e)}")
        return False


def account_status_error(role: str, user: Dict[str, Any]) -> Optional[str]:
    """
    Why an account may not use the API right now, or None if it may.

    Residents need status ACTIVE and approval APPROVED; service providers and
    employees need status ACTIVE; admins are always allowed.
    """
    if role == UserRole.RESIDENT.value:
        if user.get("status") != "ACTIVE":
            return "Your account is not active"
        if user.get("approval_status") != "APPROVED":
            return "Your account is pending approval"
    elif role == UserRole.SERVICE_PROVIDER.value:
        if user.get("status") != "ACTIVE":
            return "Your account is not active or pending approval"
    elif role == UserRole.EMPLOYEE.value:
        if user.get("status") != "ACTIVE":
            return "Your employee account is not active"
    return None


class AuthService:
    """Service for password checks, account lookup and JWT tokens"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.jwt_secret = config.auth.jwt_secret

    def hash_password(self, password: str) -> str:
        return hash_password(password, self.config.auth.bcrypt_rounds)

    def verify_password(self, password: str, password_hash: Optional[str]) -> bool:
        return verify_password(password, password_hash)

    def generate_token(self, user_id: str, role: str, email: Optional[str] = None) -> str:
        now = get_now_utc()
        payload = {
            "user_id": user_id,
            "role": role,
            "exp": now + timedelta(hours=self.config.auth.jwt_expiration_hours),
            "iat": now,
        }
        if email:
            payload["email"] = email
        return jwt.encode(payload, self.jwt_secret, algorithm=JWT_ALGORITHM)

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            return jwt.decode(token, self.jwt_secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            logger.warning("[AuthService] Token has expired")
            return None
        except jwt.InvalidTokenError:
            return None

    def get_account(self, role: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Raw account document (password hash included) or None."""
        collection = ROLE_COLLECTIONS.get(role)
        if not collection or not user_id:
            return None
        return self.db[collection].find_one(id_query(user_id))

    def get_profile(self, role: str, user_id: str) -> Optional[Dict[str, Any]]:
        account = self.get_account(role, user_id)
        if account is None:
            return None
        profile = {"id": str(account["_id"])}
        for f in PROFILE_FIELDS[role]:
            profile[f] = account.get(f)
        profile["role"] = role
        return profile

    def authenticate_admin(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        admin = self.db["admins"].find_one({"username": username})
        if not admin or not self.verify_password(password, admin.get("password_hash")):
            logger.warning(f"[AuthService] Admin login rejected: {username}")
            return None
        logger.info(f"[AuthService] ✅ Admin authenticated: {username}")
        return admin

    def authenticate_by_email(self, role: str, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Check email/password against the role's collection. Accounts without a password never match."""
        collection = ROLE_COLLECTIONS[role]
        user = self.db[collection].find_one({"email": email})
        if not user or not self.verify_password(password, user.get("password_hash")):
            logger.warning(f"[AuthService] {role} login rejected: {email}")
            return None
        logger.info(f"[AuthService] ✅ {role} authenticated: {email}")
        return user
