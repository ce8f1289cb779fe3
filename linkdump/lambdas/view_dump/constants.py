# Event / error codes
MISSING_SLUG = 'MISSING_SLUG'
DUMP_UNAVAILABLE = 'DUMP_UNAVAILABLE'  # user-facing code for both of the below
DUMP_NOT_FOUND = 'DUMP_NOT_FOUND'
DUMP_EXPIRED = 'DUMP_EXPIRED'
STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
DUMP_SERVED = 'DUMP_SERVED'
