# Error codes
MISSING_URL = 'MISSING_URL'
INVALID_URL = 'INVALID_URL'
SCREENSHOT_FAILED = 'SCREENSHOT_FAILED'

# Success events
SCREENSHOT_SUCCESS = 'SCREENSHOT_SUCCESS'
