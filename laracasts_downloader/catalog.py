"""
Catalog crawl: tags from the index page, lesson URLs from every tag page.

Tag pages link to three shapes of content. Standalone lessons and single
series episodes are kept as they are; a link to a whole series is expanded
by fetching the series page and taking every episode listed there.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Hashable, Iterable, List, Optional, TypeVar
from urllib.parse import urlparse

from .exceptions import LaracastsError
from .models import LinkKind, Tag
from .pages import parse_series_page, parse_tag_index, parse_tag_page
from .session import LaracastsSession

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Checked in this order; the first match wins
LESSON_PATTERN = re.compile(r"^/lessons/[^/]+")
EPISODE_PATTERN = re.compile(r"^/series/[^/]+/episodes/[^/]+")
SERIES_PATTERN = re.compile(r"^/series/[^/]+/?$")


def classify_link(url: str) -> LinkKind:
    path = urlparse(url).path
    if LESSON_PATTERN.match(path):
        return LinkKind.LESSON
    if EPISODE_PATTERN.match(path):
        return LinkKind.EPISODE
    if SERIES_PATTERN.match(path):
        return LinkKind.SERIES
    return LinkKind.OTHER


def unique(items: Iterable[T], key: Optional[Callable[[T], Hashable]] = None) -> List[T]:
    """Drop repeated items, keeping the first occurrence and the original order."""
    seen = set()
    result = []
    for item in items:
        marker = key(item) if key else item
        if marker in seen:
            continue
        seen.add(marker)
        result.append(item)
    return result


class Catalog:
    """Discovers tags and resolves them into a flat list of lesson URLs."""

    def __init__(self, session: LaracastsSession, fail_fast: bool = True):
        self.session = session
        self.fail_fast = fail_fast

    def list_tags(self) -> List[Tag]:
        """All tags on the public index page, one per URL (first name seen wins)."""
        doc = self.session.fetch_document(self.session.absolute('/index'))
        tags = unique(parse_tag_index(doc, self.session.base_url), key=lambda tag: tag.url)
        logger.info("Found %d tags", len(tags))
        return tags

    def expand_series(self, url: str) -> List[str]:
        doc = self.session.fetch_document(url)
        return parse_series_page(doc, self.session.base_url)

    def resolve_tag(self, tag: Tag) -> List[str]:
        """Lesson URLs linked from one tag page, with series links expanded into episodes."""
        doc = self.session.fetch_document(tag.url)

        lesson_urls: List[str] = []
        for href in parse_tag_page(doc, self.session.base_url):
            kind = classify_link(href)
            if kind in (LinkKind.LESSON, LinkKind.EPISODE):
                lesson_urls.append(href)
            elif kind is LinkKind.SERIES:
                try:
                    lesson_urls.extend(self.expand_series(href))
                except LaracastsError as e:
                    # A broken series contributes nothing; the rest of the tag still resolves
                    logger.warning("Skipping series %s: %s", href, e)

        logger.debug("Tag %s: %d lesson urls", tag.name, len(lesson_urls))
        return lesson_urls

    def resolve(self, tags: List[Tag]) -> List[str]:
        """Resolve every tag concurrently and return the merged, deduplicated lesson URLs.

        One worker runs per tag. Each worker only builds its own list; merging
        happens here once every worker has finished.

        Raises:
            LaracastsError: a tag page failed and ``fail_fast`` is on. The
                first failing tag (in input order) is reported.
        """
        if not tags:
            return []

        with ThreadPoolExecutor(max_workers=len(tags)) as executor:
            futures = [(tag, executor.submit(self.resolve_tag, tag)) for tag in tags]
        # Leaving the with-block joins every worker

        lesson_urls: List[str] = []
        for tag, future in futures:
            error = future.exception()
            if error is None:
                lesson_urls.extend(future.result())
                continue
            if self.fail_fast or not isinstance(error, LaracastsError):
                raise error
            logger.warning("Skipping tag %s: %s", tag.name, error)

        lesson_urls = unique(lesson_urls)
        logger.info("Found %d lesson urls", len(lesson_urls))
        return lesson_urls
