"""
Page interpreters.

Each function here knows the markup of exactly one page type and turns a
parsed document into plain values. When the site markup changes, this is
the only module that should need editing.
"""

import re
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from .exceptions import TokenNotFound
from .models import LessonPage, Series, Tag

LOGIN_TOKEN_SELECTOR = 'login-button[token]'
TAG_INDEX_SELECTOR = '#index li > a'
TAG_LESSON_SELECTOR = '.Lesson-List li a'
SERIES_EPISODE_SELECTOR = '.Lesson-List__title a'
LESSON_SERIES_SELECTOR = '.Video__body h2 a'
LESSON_DOWNLOAD_SELECTOR = "a[href*='/downloads']"

SERIES_ID_PATTERN = re.compile(r"/series/([^/]+)")


def _hrefs(doc: BeautifulSoup, selector: str, base_url: str) -> List[str]:
    return [urljoin(base_url + '/', a['href']) for a in doc.select(selector) if a.get('href')]


def find_login_token(doc: BeautifulSoup) -> str:
    element = doc.select_one(LOGIN_TOKEN_SELECTOR)
    token = element.get('token') if element else None
    if not token:
        raise TokenNotFound(f"Can't find the login token ({LOGIN_TOKEN_SELECTOR}) on the landing page")
    return token


def parse_tag_index(doc: BeautifulSoup, base_url: str) -> List[Tag]:
    """All tag links on the index page, in page order and possibly repeated."""
    return [
        Tag(name=a.get_text().strip(), url=urljoin(base_url + '/', a['href']))
        for a in doc.select(TAG_INDEX_SELECTOR)
        if a.get('href')
    ]


def parse_tag_page(doc: BeautifulSoup, base_url: str) -> List[str]:
    return _hrefs(doc, TAG_LESSON_SELECTOR, base_url)


def parse_series_page(doc: BeautifulSoup, base_url: str) -> List[str]:
    return _hrefs(doc, SERIES_EPISODE_SELECTOR, base_url)


def series_id_from_url(url: str) -> Optional[str]:
    match = SERIES_ID_PATTERN.search(urlparse(url).path)
    return match.group(1) if match else None


def parse_lesson_page(doc: BeautifulSoup, base_url: str) -> LessonPage:
    series = None
    heading = doc.select_one(LESSON_SERIES_SELECTOR)
    if heading is not None and heading.get('href'):
        series_url = urljoin(base_url + '/', heading['href'])
        series_id = series_id_from_url(series_url)
        if series_id:
            series = Series(
                id=series_id,
                name=heading.get_text().strip().strip(':'),
                url=series_url,
            )

    download = doc.select_one(LESSON_DOWNLOAD_SELECTOR)
    download_url = urljoin(base_url + '/', download['href']) if download is not None else None
    return LessonPage(series=series, download_url=download_url)
