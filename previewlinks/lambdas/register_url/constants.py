# Error codes
INVALID_JSON = 'INVALID_JSON'
INVALID_REQUEST = 'INVALID_REQUEST'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
SHORTCODE_ALLOCATION_EXHAUSTED = 'SHORTCODE_ALLOCATION_EXHAUSTED'
DUPLICATE_CANONICAL_URL = 'DUPLICATE_CANONICAL_URL'

# Success events
REGISTER_SUCCESS = 'REGISTER_SUCCESS'
