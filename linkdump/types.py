from collections.abc import Callable
from datetime import datetime
from typing import Any


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type LambdaConfiguration = dict[str, Any]
type HttpHeaders = dict[str, str]
type AppConfig = dict[str, Any]

# Persisted representations
type EncodedItem = dict[str, Any]
type DumpRecord = dict[str, Any]

# Injected collaborators
type Clock = Callable[[], datetime]
type SlugGenerator = Callable[[], str]

# Minutes from Expiry.OPTIONS_MINUTES, or Expiry.NEVER
type ExpiryOption = int | str
