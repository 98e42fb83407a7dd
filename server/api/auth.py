# server/api/auth.py

import logging
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import APIRouter, HTTPException, status, Depends
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from server.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, BCRYPT_ROUNDS
from server.database import get_db
from server.models.user import User as UserModel
from server.core import store
from server.api.schemas import RegisterRequest, UserOut, dump


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def authenticate_user(db: Session, email: str, password: str):
    user = store.find_user_by_email(db, email)
    if not user or not verify_password(password, user.password):
        return None
    return user


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


def get_optional_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> UserModel | None:
    """
    Resolve the bearer token to a user, or None when there is no valid session.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        subject = payload.get("sub")
        if subject is None:
            return None
        return store.get_user(db, int(subject))
    except (JWTError, ValueError):
        return None


def get_current_user(user: UserModel | None = Depends(get_optional_user)) -> UserModel:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest | None = None, db: Session = Depends(get_db)):
    payload = payload or RegisterRequest()
    if not payload.email or not payload.password:
        return JSONResponse(status_code=400, content={"message": "Email and password are required"})

    try:
        hashed = get_password_hash(payload.password)
        result = store.create_user(db, payload.name, payload.email, hashed)
    except Exception:
        db.rollback()
        logger.exception("Registration error")
        return JSONResponse(status_code=500, content={"message": "Something went wrong"})

    if isinstance(result, store.EmailTaken):
        return JSONResponse(status_code=400, content={"message": "User already exists"})

    logger.info("Registered user %s", result.user.id)
    return {
        "user": dump(UserOut.model_validate(result.user)),
        "message": "User created successfully",
    }


@router.post("/token")
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        return JSONResponse(status_code=401, content={"message": "Invalid email or password"})
    access_token = create_access_token(data={"sub": str(user.id)})
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/session")
def read_session(token: str | None = Depends(oauth2_scheme), user: UserModel = Depends(get_current_user)):
    expires = jwt.get_unverified_claims(token)["exp"]
    return {
        "user": dump(UserOut.model_validate(user)),
        "expires": datetime.fromtimestamp(expires, tz=timezone.utc).isoformat(),
    }
