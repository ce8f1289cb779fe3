"""Client identity resolution

The rate limiter needs an identity for whoever publishes a dump. API Gateway
already knows the caller's address, so that is preferred. When it is missing
(e.g. some local invocations), the public address can be looked up through an
external resolver configured with `IP_RESOLVER_URL`. Every lookup is bounded by
a short timeout; on failure the identity degrades to 'unknown' rather than
blocking the write.

Functions:
    source_ip(event) -> str | None
        Caller address from a REST (v1) or HTTP (v2) API Gateway event.
    resolve_public_ip(url, timeout) -> str
        Ask an external resolver for the public address.
    resolve_client_id(event) -> str
        Best-effort client identity for rate limiting.
"""

import os
import json
import ipaddress
import logging
import urllib.error
import urllib.request

from linkdump.constants import ENV, Identity
from linkdump.exceptions import IdentityResolutionError
from linkdump.types import LambdaEvent


logger = logging.getLogger(__name__)


def source_ip(event: LambdaEvent) -> str | None:
    request_context = event.get('requestContext') or {}
    ip = (request_context.get('identity') or {}).get('sourceIp') or (request_context.get('http') or {}).get('sourceIp')
    return ip or None


def resolve_public_ip(url: str, timeout: float = Identity.RESOLVER_TIMEOUT_SECONDS) -> str:
    """Look up the public address through an ipify-compatible resolver.

    The resolver may answer with JSON ({"ip": "203.0.113.7"}) or plain text.

    Raises:
        IdentityResolutionError: on network errors, timeouts, or a reply that is not an IP address.
    """
    try:
        with urllib.request.urlopen(url, timeout=timeout) as r:  # noqa: S310
            payload = r.read().decode('utf-8').strip()
    except (urllib.error.URLError, TimeoutError, OSError, ValueError) as e:
        raise IdentityResolutionError(f'Failed to reach identity resolver at {url}') from e

    try:
        ip = json.loads(payload).get('ip') if payload.startswith('{') else payload
        return str(ipaddress.ip_address(ip))
    except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
        raise IdentityResolutionError(f'Identity resolver returned an unexpected reply: {payload[:64]!r}') from e


def resolve_client_id(event: LambdaEvent) -> str:
    if ip := source_ip(event):
        return ip

    resolver_url = os.getenv(ENV.App.IP_RESOLVER_URL)
    if not resolver_url:
        logger.warning('No source IP in event and no identity resolver configured. Using fallback identity.')
        return Identity.UNKNOWN

    try:
        return resolve_public_ip(resolver_url)
    except IdentityResolutionError:
        logger.warning('Identity resolution failed. Using fallback identity.', exc_info=True, extra={'resolverUrl': resolver_url})
        return Identity.UNKNOWN
