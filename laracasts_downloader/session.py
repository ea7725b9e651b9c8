import logging
from typing import Dict, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from .exceptions import NetworkError, UnexpectedStatus

logger = logging.getLogger(__name__)

USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'


class LaracastsSession:
    """One cookie-carrying HTTP client shared by every component.

    Logging in stores the session cookie in the underlying ``requests.Session``
    jar, so every later request made through this object is authenticated.
    """

    def __init__(self, base_url: str, timeout: Optional[float] = 60.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with an empty cookie jar."""
        session = requests.Session()
        session.headers.update({
            'User-Agent': USER_AGENT,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        })
        return session

    def absolute(self, href: str) -> str:
        """Resolve a possibly relative href against the site origin."""
        return urljoin(self.base_url + '/', href)

    def get(self, url: str, stream: bool = False) -> requests.Response:
        """GET ``url`` and return the response, which is guaranteed to be a 200."""
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout, stream=stream)
        except requests.RequestException as e:
            raise NetworkError(url, e) from e

        if response.status_code != 200:
            response.close()
            raise UnexpectedStatus(url, response.status_code)
        return response

    def post_form(self, url: str, data: Dict[str, str]) -> requests.Response:
        """POST a url-encoded form. The status code is left for the caller to judge."""
        logger.debug("POST %s", url)
        try:
            return self.session.post(url, data=data, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(url, e) from e

    def fetch_document(self, url: str) -> BeautifulSoup:
        """GET a page and parse it into a CSS-selectable document."""
        response = self.get(url)
        try:
            return BeautifulSoup(response.content, 'lxml')
        finally:
            response.close()

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
