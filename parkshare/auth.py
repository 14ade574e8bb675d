import logging
import time
from typing import Optional

import httpx
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from .config import FIREBASE_PROJECT_ID
from .database import get_db
from .domain.users.repository import UserRepository
from .models import ROLE_DRIVER, User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)
CERT_CACHE_SECONDS = 3600

# Cache for Google's public certificates: {"keys": {kid: pem}, "fetched_at": float}
_cached_keys: dict = {}


async def get_google_public_keys(force_refresh: bool = False) -> dict:
    """Fetch Google's public certificates for Firebase token verification"""
    if (
        not force_refresh
        and _cached_keys
        and time.time() - _cached_keys["fetched_at"] < CERT_CACHE_SECONDS
    ):
        return _cached_keys["keys"]

    try:
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.get(GOOGLE_CERTS_URL)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching Google public keys: {e}")
        return _cached_keys.get("keys", {})

    _cached_keys["keys"] = response.json()
    _cached_keys["fetched_at"] = time.time()
    logger.info(f"✅ Fetched {len(_cached_keys['keys'])} Google public keys")
    return _cached_keys["keys"]


async def verify_firebase_token(token: str) -> dict:
    """Verify a Firebase ID token's signature and standard claims"""
    if not FIREBASE_PROJECT_ID:
        logger.error("❌ FIREBASE_PROJECT_ID not configured")
        raise HTTPException(status_code=500, detail="Firebase not configured")

    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        raise HTTPException(status_code=401, detail="Invalid token header") from e

    if header.get("alg") != "RS256" or not header.get("kid"):
        raise HTTPException(status_code=401, detail="Invalid token algorithm")

    kid = header["kid"]
    public_keys = await get_google_public_keys()
    if kid not in public_keys:
        logger.warning(f"⚠️ Key ID {kid} not found in public keys, refreshing")
        public_keys = await get_google_public_keys(force_refresh=True)
        if kid not in public_keys:
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    try:
        claims = jwt.decode(
            token,
            public_keys[kid],
            algorithms=["RS256"],
            audience=FIREBASE_PROJECT_ID,
            issuer=f"https://securetoken.google.com/{FIREBASE_PROJECT_ID}",
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.error(f"❌ Token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e

    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return claims


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from a Firebase ID token, creating a driver record on first sight"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    claims = await verify_firebase_token(credentials.credentials)
    firebase_uid = claims["sub"]

    user = UserRepository.get_user_by_firebase_uid(db, firebase_uid)
    if user:
        return user

    email = claims.get("email")
    if not email:
        raise HTTPException(status_code=401, detail="Token has no email claim")

    user = UserRepository.create_user(
        db,
        firebase_uid=firebase_uid,
        email=email.lower(),
        display_name=claims.get("name"),
        role=ROLE_DRIVER,
    )
    logger.info(f"✅ Created user {user.id} for {user.email}")
    return user
