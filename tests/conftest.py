from http.client import HTTPMessage
from types import SimpleNamespace
from typing import Dict, List, Optional, Tuple, Union

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from laracasts_downloader.progress_manager import ProgressDisplay
from laracasts_downloader.session import LaracastsSession

BASE_URL = 'https://laracasts.test'


class FakeSite(BaseAdapter):
    """Transport adapter serving canned responses by URL and recording every request."""

    def __init__(self):
        super().__init__()
        self.routes: Dict[Tuple[str, str], Union[Tuple[int, Dict[str, str], bytes], Exception]] = {}
        self.requests: List[requests.PreparedRequest] = []

    def add(self, url: str, body: Union[str, bytes] = b'', status: int = 200,
            headers: Optional[Dict[str, str]] = None, method: str = 'GET'):
        if isinstance(body, str):
            body = body.encode('utf-8')
        self.routes[(method, BASE_URL + url if url.startswith('/') else url)] = (status, headers or {}, body)

    def add_html(self, url: str, html: str, status: int = 200):
        self.add(url, html, status, {'Content-Type': 'text/html; charset=utf-8'})

    def add_error(self, url: str, error: Exception, method: str = 'GET'):
        self.routes[(method, BASE_URL + url if url.startswith('/') else url)] = error

    def add_file(self, url: str, filename: str, data: bytes, content_length: Optional[int] = None):
        self.add(url, data, headers={
            'Content-Type': 'video/mp4',
            'Content-Disposition': f'attachment; filename="{filename}"',
            'Content-Length': str(len(data) if content_length is None else content_length),
        })

    def requested(self, method: str = 'GET') -> List[str]:
        return [r.url for r in self.requests if r.method == method]

    def send(self, request, **kwargs):
        self.requests.append(request)
        route = self.routes.get((request.method, request.url))
        if isinstance(route, Exception):
            raise route

        status, headers, body = route or (404, {}, b'not found')
        response = requests.Response()
        response.status_code = status
        response.headers = CaseInsensitiveDict(headers)
        response._content = body
        response._content_consumed = True
        response.url = request.url
        response.request = request
        response.encoding = 'utf-8'
        response.raw = _raw_with_headers(headers)
        return response

    def close(self):
        pass


def _raw_with_headers(headers: Dict[str, str]):
    """Just enough of a urllib3 response for requests to copy Set-Cookie into the session jar."""
    message = HTTPMessage()
    for name, value in headers.items():
        message[name] = value
    return SimpleNamespace(_original_response=SimpleNamespace(msg=message))


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def session(site):
    laracasts = LaracastsSession(BASE_URL, timeout=5)
    laracasts.session.mount('https://', site)
    yield laracasts
    laracasts.close()


@pytest.fixture
def quiet_progress():
    return ProgressDisplay(enabled=False)


def page(body: str) -> str:
    return f"<html><head><title>Laracasts</title></head><body>{body}</body></html>"


def tag_index(*links: Tuple[str, str]) -> str:
    items = ''.join(f'<li><a href="{href}"> {name} </a></li>' for href, name in links)
    return page(f'<section id="index"><ul>{items}</ul></section>')


def tag_page(*hrefs: str) -> str:
    items = ''.join(f'<li><a href="{href}">Lesson</a></li>' for href in hrefs)
    return page(f'<ul class="Lesson-List">{items}</ul>')


def series_page(*hrefs: str) -> str:
    items = ''.join(f'<li><h4 class="Lesson-List__title"><a href="{href}">Episode</a></h4></li>' for href in hrefs)
    return page(f'<ol class="Lesson-List">{items}</ol>')


def lesson_page(download_href: Optional[str], series_href: Optional[str] = None,
                series_name: str = 'Alpha Series:') -> str:
    heading = f'<h2><a href="{series_href}">\n  {series_name}\n</a> Episode</h2>' if series_href else '<h2>Lesson</h2>'
    download = f'<a class="button" href="{download_href}">Download</a>' if download_href else ''
    return page(f'<div class="Video__body">{heading}<p>Text</p>{download}</div>')


def landing_page(token: Optional[str] = 'tok-123') -> str:
    button = f'<login-button token="{token}"></login-button>' if token else '<button>Sign in</button>'
    return page(f'<nav>{button}</nav>')
