import logging
import httpx

from ..errors import UpstreamError

logger = logging.getLogger(__name__)

BODY_PREVIEW = 500


async def request_json(http: httpx.AsyncClient, provider: str, method: str, url: str, **kwargs):
    """Send one request and return its decoded JSON, or raise UpstreamError.

    Timeouts, transport failures, non-2xx answers and bodies that are not
    JSON all end up as UpstreamError carrying the provider and raw body.
    """
    try:
        r = await http.request(method, url, **kwargs)
        r.raise_for_status()
    except httpx.TimeoutException as e:
        logger.warning("%s timeout on %s", provider, url)
        raise UpstreamError(provider, f"timeout calling {url}") from e
    except httpx.HTTPStatusError as e:
        body = e.response.text[:BODY_PREVIEW]
        logger.warning("%s HTTP %s on %s", provider, e.response.status_code, url)
        raise UpstreamError(provider, f"HTTP {e.response.status_code} from {url}", body) from e
    except httpx.HTTPError as e:
        logger.warning("%s transport error on %s: %s", provider, url, e)
        raise UpstreamError(provider, f"{type(e).__name__}: {e}") from e

    try:
        return r.json()
    except ValueError as e:
        raise UpstreamError(provider, f"malformed JSON from {url}", r.text[:BODY_PREVIEW]) from e
