# Structured log events / error codes of the redirect_url lambda
MISSING_CODE = 'MISSING_CODE'
RECORD_NOT_FOUND = 'RECORD_NOT_FOUND'
RECORD_EXPIRED = 'RECORD_EXPIRED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
