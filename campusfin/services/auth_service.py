"""Account sign-up and sign-in."""
from sqlmodel import Session, select
import bcrypt

from campusfin.middleware.auth import create_access_token
from campusfin.models.user import User
from campusfin.schemas.auth import SignInRequest, SignUpRequest, TokenResponse
from campusfin.services.category_service import CategoryService
from campusfin.services.errors import ServiceError, ValidationError
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.auth")

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], hashed_password.encode("utf-8"))


class AuthenticationError(ServiceError):
    status_code = 401

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="UNAUTHORIZED")


class AuthService:
    """Creates users and issues bearer tokens."""

    def __init__(self, session: Session):
        self.session = session

    def sign_up(self, request: SignUpRequest) -> TokenResponse:
        """Register a user, seed their default categories and return a token."""
        email = request.email.lower()
        existing = self.session.exec(select(User).where(User.email == email)).first()
        if existing:
            raise ValidationError("User with this email already exists")

        user = User(email=email, name=request.name, password_hash=hash_password(request.password))
        self.session.add(user)
        self.session.flush()
        CategoryService(self.session).seed_default_categories(user.id, commit=False)
        self.session.commit()
        self.session.refresh(user)

        logger.info("User signed up", user_id=user.id)
        return TokenResponse(token=create_access_token(user.id, user.email), user_id=user.id, email=user.email)

    def sign_in(self, request: SignInRequest) -> TokenResponse:
        user = self.session.exec(select(User).where(User.email == request.email.lower())).first()
        if not user or not verify_password(request.password, user.password_hash):
            logger.warning("Failed sign-in attempt", email=request.email)
            raise AuthenticationError()

        return TokenResponse(token=create_access_token(user.id, user.email), user_id=user.id, email=user.email)
