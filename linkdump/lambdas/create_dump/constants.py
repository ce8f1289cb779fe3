# Event / error codes
INVALID_JSON = 'INVALID_JSON'
MISSING_TEXT = 'MISSING_TEXT'
INVALID_EXPIRY = 'INVALID_EXPIRY'
TEXT_TOO_LONG = 'TEXT_TOO_LONG'
EMPTY_DUMP = 'EMPTY_DUMP'
RATE_LIMITED = 'RATE_LIMITED'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
DUMP_CREATED = 'DUMP_CREATED'
