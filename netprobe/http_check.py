# netprobe/http_check.py
"""
HTTP probe for netprobe.

Any response with a status code below 500 counts as success: a 401/403/404
still proves the server is reachable. 5xx or no response at all is a failure.
"""

import logging
import time

import requests
from requests import exceptions as req_exc

from .error_kinds import (
    HTTP_OK,
    HTTP_5XX,
    HTTP_OTHER_STATUS,
    HTTP_TIMEOUT,
    HTTP_SSL,
    HTTP_CONN_RESET,
    HTTP_DNS_ERROR,
    HTTP_CONN_ERROR,
    HTTP_INVALID_URL,
    HTTP_OTHER,
)
from .models import HttpResult

logger = logging.getLogger(__name__)


def _elapsed_ms(start):
    return int(round((time.monotonic() - start) * 1000.0))


def _status_outcome(status_code):
    """Return (success, error_kind) for a received status code."""
    if 1 <= status_code < 500:
        return True, HTTP_OK
    if 500 <= status_code < 600:
        return False, HTTP_5XX
    return False, HTTP_OTHER_STATUS


def run_http(url, timeout=5.0):
    start = time.monotonic()
    error = ""

    try:
        resp = requests.get(url, timeout=timeout, allow_redirects=True)
        http_ms = _elapsed_ms(start)
        status_code = resp.status_code
        ok, error_kind = _status_outcome(status_code)
        if not ok:
            error = f"HTTP {status_code}"
        return HttpResult(
            url=url,
            success=ok,
            status_code=status_code,
            elapsed_ms=http_ms,
            error_message=error,
            error_kind=error_kind,
        )

    except (req_exc.MissingSchema, req_exc.InvalidSchema, req_exc.InvalidURL) as e:
        # the request never left this machine
        http_ms = 0
        error = str(e)
        error_kind = HTTP_INVALID_URL
    except req_exc.Timeout as e:
        http_ms = _elapsed_ms(start)
        error = str(e)
        error_kind = HTTP_TIMEOUT
    except req_exc.SSLError as e:
        http_ms = _elapsed_ms(start)
        error = str(e)
        error_kind = HTTP_SSL
    except req_exc.ConnectionError as e:
        http_ms = _elapsed_ms(start)
        error = str(e)
        msg = error.lower()
        if "connection reset by peer" in msg:
            error_kind = HTTP_CONN_RESET
        elif "failed to resolve" in msg or "name or service not known" in msg or "temporary failure in name resolution" in msg:
            error_kind = HTTP_DNS_ERROR
        else:
            error_kind = HTTP_CONN_ERROR
    except req_exc.RequestException as e:
        http_ms = _elapsed_ms(start)
        error = str(e)
        error_kind = HTTP_OTHER
    except Exception as e:
        http_ms = _elapsed_ms(start)
        error = str(e) or e.__class__.__name__
        error_kind = HTTP_OTHER

    logger.debug("http %s failed (%s): %s", url, error_kind, error)
    return HttpResult(
        url=url,
        success=False,
        status_code=0,
        elapsed_ms=http_ms,
        error_message=error or error_kind,
        error_kind=error_kind,
    )
