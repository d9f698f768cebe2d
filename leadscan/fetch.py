import logging
from urllib.parse import urljoin

import requests

from .models import FetchError, FetchResult

logger = logging.getLogger(__name__)

REDIRECT_CODES = (301, 302, 303, 307, 308)


def _get(session, url: str, cfg: dict, hops_left: int) -> tuple[str, str]:
    fetch_cfg = cfg["fetch"]
    try:
        resp = session.get(
            url,
            headers=fetch_cfg.get("headers") or {},
            timeout=fetch_cfg.get("timeout_s", 15),
            allow_redirects=False,
        )
    except requests.Timeout:
        raise FetchError("timeout")
    except requests.RequestException as exc:
        raise FetchError(str(exc) or exc.__class__.__name__)

    try:
        location = resp.headers.get("location")
        if resp.status_code in REDIRECT_CODES and location:
            if hops_left <= 0:
                raise FetchError("too many redirects")
            target = urljoin(url, location)
            logger.debug("Redirect %s -> %s (%d hops left)", url, target, hops_left - 1)
            return _get(session, target, cfg, hops_left - 1)
        if not 200 <= resp.status_code < 300:
            raise FetchError(f"HTTP {resp.status_code}")
        return resp.text, url
    finally:
        resp.close()


def fetch(url: str, cfg: dict, session=None) -> FetchResult:
    """GET one page, following redirects up to ``fetch.max_redirects`` hops.

    Never raises: every failure is folded into ``FetchResult.failure``.
    """
    own_session = session is None
    if own_session:
        session = requests.Session()
    try:
        html, final_url = _get(session, url, cfg, int(cfg["fetch"].get("max_redirects", 5)))
    except FetchError as exc:
        logger.info("Fetch failed for %s: %s", url, exc.reason)
        return FetchResult.failure(exc.reason)
    finally:
        if own_session:
            session.close()
    return FetchResult.success(html, final_url)
