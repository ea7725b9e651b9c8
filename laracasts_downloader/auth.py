"""
Logs the shared session in with an email and password.
"""

import logging

from .exceptions import AuthError
from .pages import find_login_token
from .session import LaracastsSession

logger = logging.getLogger(__name__)


class Authenticator:
    """
    Exchanges credentials for a session cookie.

    The cookie lands in the shared session's jar; nothing is returned to the
    caller, every later request through the same session is simply logged in.
    """

    def __init__(self, session: LaracastsSession):
        self.session = session

    def fetch_token(self) -> str:
        """Read the login token from the landing page.

        Raises:
            TokenNotFound: the landing page no longer carries the token element.
        """
        doc = self.session.fetch_document(self.session.absolute('/'))
        return find_login_token(doc)

    def login(self, username: str, password: str):
        """Post the login form.

        Raises:
            AuthError: the site answered with anything but HTTP 200.
        """
        logger.info("Logging in as %s", username)
        token = self.fetch_token()

        url = self.session.absolute('/sessions')
        response = self.session.post_form(url, {
            'email': username,
            'password': password,
            '_token': token,
        })
        response.close()

        if response.status_code != 200:
            raise AuthError(url, response.status_code)
        logger.info("Logged in")
