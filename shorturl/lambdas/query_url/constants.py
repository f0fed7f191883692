# Log event / error codes
MISSING_SHORT_URL = 'MISSING_SHORT_URL'
MALFORMED_SHORT_URL = 'MALFORMED_SHORT_URL'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
QUERY_SUCCESS = 'QUERY_SUCCESS'
