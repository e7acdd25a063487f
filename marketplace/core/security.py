import logging
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any

import jwt

from marketplace.core.config import Settings, settings

logger = logging.getLogger(__name__)


class Permission(IntEnum):
    """사용자 권한 코드"""

    ADMIN = 0
    STUDENT = 1
    INSTRUCTOR = 2


class SecurityManager:
    """JWT 액세스 토큰 발급 및 검증"""

    def __init__(self, config: Settings | None = None) -> None:
        self.config = config or settings
        self.secret_key = self.config.secret_key
        self.algorithm = "HS256"
        self.issuer = "course-marketplace"

    def create_access_token(
        self, data: dict[str, Any], expires_delta: timedelta | None = None
    ) -> str:
        """JWT 액세스 토큰 생성"""
        to_encode = data.copy()
        now = datetime.now(timezone.utc)

        if expires_delta:
            expire = now + expires_delta
        else:
            expire = now + timedelta(minutes=self.config.access_token_expire_minutes)

        to_encode.update(
            {
                "exp": expire,
                "iat": now,
                "iss": self.issuer,
                "type": "access",
            }
        )

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> dict[str, Any] | None:
        """JWT 토큰 검증"""
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["exp", "iat", "iss", "type"]},
            )

            if payload.get("type") != "access":
                logger.warning("Invalid token type")
                return None

            return payload
        except jwt.ExpiredSignatureError:
            logger.warning("Token has expired")
            return None
        except jwt.InvalidIssuerError:
            logger.warning("Invalid token issuer")
            return None
        except jwt.MissingRequiredClaimError as e:
            logger.warning(f"Missing required claim: {e}")
            return None
        except jwt.PyJWTError as e:
            logger.warning(f"Invalid token: {e}")
            return None


# 전역 보안 관리자 인스턴스
security = SecurityManager()


def get_security_manager() -> SecurityManager:
    """보안 관리자 의존성 주입"""
    return security
