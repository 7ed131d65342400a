from s3shortener.services.shortener_service import ShortenerService, parse_expiration_time, validate_original_url
from s3shortener.services.redirect_resolver import RedirectResolver, Resolution, ResolutionStatus


__all__ = [
    'ShortenerService',
    'parse_expiration_time',
    'validate_original_url',
    'RedirectResolver',
    'Resolution',
    'ResolutionStatus',
]
