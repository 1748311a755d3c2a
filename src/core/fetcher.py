from typing import Dict, List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import parse_url
from urllib3.util.retry import Retry

from config.constants import HTTP_CONFIG, get_default_headers, get_user_agent
from ..models.exceptions import NetworkException
from ..models.http_header import HttpHeader
from ..models.traffic import TrafficRecord
from ..utils.logger import get_logger

logger = get_logger("fetcher")

_HTTP_VERSIONS = {9: "HTTP/0.9", 10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2"}


def _status_line(resp: requests.Response) -> str:
    version = _HTTP_VERSIONS.get(getattr(resp.raw, "version", 11), "HTTP/1.1")
    reason = resp.reason or ""
    return f"{version} {resp.status_code} {reason}".rstrip()


def _response_header(resp: requests.Response) -> HttpHeader:
    # requests folds repeated fields into one comma-joined value; the urllib3
    # header dict underneath still has every Set-Cookie on its own
    raw_headers = getattr(resp.raw, "headers", None)
    return HttpHeader.from_urllib3(_status_line(resp), raw_headers if raw_headers is not None else resp.headers)


class HeaderFetcher:
    """Fetches live responses and wraps them as traffic records."""

    def __init__(
        self,
        timeout: int = 15,
        max_retries: int = 2,
        user_agent: Optional[str] = None,
        proxy: Optional[str] = None,
        origin: Optional[str] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ):
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent or get_user_agent()
        self.proxy = proxy
        self.origin = origin
        self.extra_headers = dict(extra_headers or {})

        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.trust_env = True  # honor system/env proxies

        session.headers.update(get_default_headers())
        session.headers["User-Agent"] = self.user_agent

        retry = Retry(
            total=self.max_retries,
            connect=self.max_retries,
            read=self.max_retries,
            backoff_factor=HTTP_CONFIG['retry_backoff_factor'],
            status_forcelist=tuple(HTTP_CONFIG['retry_status_codes']),
            allowed_methods=frozenset(HTTP_CONFIG['retry_methods']),
            raise_on_status=False,
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(
            max_retries=retry,
            pool_connections=HTTP_CONFIG['pool_connections'],
            pool_maxsize=HTTP_CONFIG['pool_maxsize'],
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        if self.proxy:
            session.proxies.update({
                "http": self.proxy,
                "https": self.proxy,
            })

        return session

    def _request_header(self, resp: requests.Response, method: str, url: str) -> HttpHeader:
        prepared = resp.request
        path = getattr(prepared, "path_url", None) or (parse_url(url).request_uri or "/")
        host = parse_url(url).netloc or ""
        pairs: List[Tuple[str, str]] = [("Host", host)]
        sent = getattr(prepared, "headers", None) or {}
        pairs.extend((k, v) for k, v in sent.items() if k.lower() != "host")
        return HttpHeader.from_pairs(f"{method} {path} HTTP/1.1", pairs)

    def fetch(self, url: str, method: str = "GET") -> TrafficRecord:
        method = (method or "GET").upper()
        headers = dict(self.extra_headers)
        if self.origin:
            headers["Origin"] = self.origin

        logger.debug(f"Fetching {method} {url}")
        try:
            resp = self.session.request(
                method,
                url,
                headers=headers,
                timeout=self.timeout,
                allow_redirects=False,
                stream=True,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"Timeout fetching {url}: {e}")
            raise NetworkException(f"Timeout after {self.max_retries} retries", url=url)
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Connection error fetching {url}: {e}")
            raise NetworkException(f"Connection failed: {e}", url=url)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request exception fetching {url}: {e}")
            raise NetworkException(f"Request failed: {e}", url=url)

        try:
            response_header = _response_header(resp)
            request_header = self._request_header(resp, method, url)
        finally:
            resp.close()

        logger.debug(f"Fetched {url} - {resp.status_code}")
        return TrafficRecord(
            request_header=request_header,
            response_header=response_header,
            method=method,
            url=url,
            status_code=int(resp.status_code),
        )

    def close(self):
        if self.session:
            self.session.close()

    def __enter__(self) -> "HeaderFetcher":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
