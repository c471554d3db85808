# amc_portal/config/security.py
# Security configuration for authentication and HTTP responses

from datetime import timedelta
from typing import Dict, Optional

from .settings import Settings, get_settings


class SecurityConfig:
    """Security configuration for the application"""

    # Password policy
    PASSWORD = {
        'min_length': 6,
        'name_min_length': 2,
    }

    # Token claims
    TOKEN = {
        'access_type': 'access',
        'refresh_type': 'refresh',
        'header_scheme': 'Bearer',
    }

    # Security headers
    SECURITY_HEADERS = {
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'DENY',
        'X-XSS-Protection': '1; mode=block',
        'Referrer-Policy': 'no-referrer',
    }

    @classmethod
    def access_token_lifetime(cls, settings: Optional[Settings] = None) -> timedelta:
        return timedelta(minutes=(settings or get_settings()).access_token_expire_minutes)

    @classmethod
    def refresh_token_lifetime(cls, settings: Optional[Settings] = None) -> timedelta:
        return timedelta(days=(settings or get_settings()).refresh_token_expire_days)

    @classmethod
    def bcrypt_rounds(cls, settings: Optional[Settings] = None) -> int:
        return (settings or get_settings()).bcrypt_rounds

    @classmethod
    def response_headers(cls, production: bool = False) -> Dict[str, str]:
        """Headers added to every response; HSTS only outside development"""
        headers = dict(cls.SECURITY_HEADERS)
        if production:
            headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return headers
