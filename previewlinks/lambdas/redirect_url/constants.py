# Error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
MALFORMED_SHORTCODE = 'MALFORMED_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'

# Success events
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
