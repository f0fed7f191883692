# Log event / error codes
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_ORIGINAL_URL = 'MISSING_ORIGINAL_URL'
INVALID_ORIGINAL_URL = 'INVALID_ORIGINAL_URL'
SHORT_CODE_OVERFLOW = 'SHORT_CODE_OVERFLOW'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
