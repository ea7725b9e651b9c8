import pytest
import requests

from conftest import BASE_URL, series_page, tag_index, tag_page
from laracasts_downloader.catalog import Catalog, classify_link, unique
from laracasts_downloader.exceptions import NetworkError, UnexpectedStatus
from laracasts_downloader.models import LinkKind, Tag


@pytest.mark.parametrize('url, kind', [
    ('https://laracasts.com/lessons/faster-workflow-with-generators', LinkKind.LESSON),
    ('https://laracasts.com/series/es6-cliffsnotes/episodes/16', LinkKind.EPISODE),
    ('https://laracasts.com/series/es6-cliffsnotes', LinkKind.SERIES),
    ('https://laracasts.com/series/es6-cliffsnotes/', LinkKind.SERIES),
    ('https://laracasts.com/discuss/channels/general', LinkKind.OTHER),
    ('https://laracasts.com/series', LinkKind.OTHER),
])
def test_classify_link(url, kind):
    assert classify_link(url) is kind


def test_unique_keeps_first_occurrence_in_order():
    assert unique(['b', 'a', 'b', 'c', 'a']) == ['b', 'a', 'c']


def test_tags_with_the_same_url_are_the_same_tag():
    first = Tag('PHP', f'{BASE_URL}/skills/php')
    again = Tag('PHP (popular)', f'{BASE_URL}/skills/php')

    assert first == again
    assert len({first, again}) == 1
    assert first != Tag('PHP', f'{BASE_URL}/skills/laravel')


def test_list_tags_drops_repeated_urls_first_name_wins(session, site):
    site.add_html('/index', tag_index(
        ('/skills/php', 'PHP'),
        ('/skills/vue', 'Vue'),
        ('/skills/php', 'PHP (popular)'),
    ))

    tags = Catalog(session).list_tags()

    assert tags == [Tag('PHP', f'{BASE_URL}/skills/php'), Tag('Vue', f'{BASE_URL}/skills/vue')]
    assert [tag.name for tag in tags] == ['PHP', 'Vue']


def test_list_tags_failure_propagates(session, site):
    site.add_html('/index', 'down', status=503)
    with pytest.raises(UnexpectedStatus) as info:
        Catalog(session).list_tags()
    assert info.value.status_code == 503


def test_resolve_tag_classifies_and_expands_series(session, site):
    site.add_html('/skills/php', tag_page(
        '/lessons/beta',
        '/series/gamma/episodes/3',
        '/series/alpha',
        '/discuss/threads/1',
    ))
    site.add_html('/series/alpha', series_page('/series/alpha/episodes/1', '/series/alpha/episodes/2'))

    urls = Catalog(session).resolve_tag(Tag('PHP', f'{BASE_URL}/skills/php'))

    assert urls == [
        f'{BASE_URL}/lessons/beta',
        f'{BASE_URL}/series/gamma/episodes/3',
        f'{BASE_URL}/series/alpha/episodes/1',
        f'{BASE_URL}/series/alpha/episodes/2',
    ]
    # Episode links are never fetched during resolution
    assert f'{BASE_URL}/series/gamma/episodes/3' not in site.requested()


def test_broken_series_page_is_skipped(session, site):
    site.add_html('/skills/php', tag_page('/series/broken', '/lessons/beta'))
    site.add_html('/series/broken', 'oops', status=500)

    urls = Catalog(session).resolve_tag(Tag('PHP', f'{BASE_URL}/skills/php'))

    assert urls == [f'{BASE_URL}/lessons/beta']


def test_unreachable_series_page_is_skipped(session, site):
    site.add_html('/skills/php', tag_page('/series/gone'))
    site.add_error(f'{BASE_URL}/series/gone', requests.ConnectionError('reset'))

    assert Catalog(session).resolve_tag(Tag('PHP', f'{BASE_URL}/skills/php')) == []


def _two_tag_catalog(site):
    site.add_html('/skills/php', tag_page('/lessons/beta', '/series/alpha'))
    site.add_html('/skills/vue', tag_page('/series/alpha/episodes/2', '/lessons/delta'))
    site.add_html('/series/alpha', series_page('/series/alpha/episodes/1', '/series/alpha/episodes/2'))
    return [Tag('PHP', f'{BASE_URL}/skills/php'), Tag('Vue', f'{BASE_URL}/skills/vue')]


def test_resolve_merges_tags_and_deduplicates(session, site):
    tags = _two_tag_catalog(site)

    urls = Catalog(session).resolve(tags)

    assert urls == [
        f'{BASE_URL}/lessons/beta',
        f'{BASE_URL}/series/alpha/episodes/1',
        f'{BASE_URL}/series/alpha/episodes/2',
        f'{BASE_URL}/lessons/delta',
    ]


def test_resolve_is_repeatable(session, site):
    tags = _two_tag_catalog(site)
    catalog = Catalog(session)

    assert set(catalog.resolve(tags)) == set(catalog.resolve(list(reversed(tags))))


def test_resolve_without_tags_is_empty(session):
    assert Catalog(session).resolve([]) == []


def test_failing_tag_aborts_resolve_by_default(session, site):
    tags = _two_tag_catalog(site)
    site.add_html('/skills/vue', 'boom', status=500)

    with pytest.raises(UnexpectedStatus) as info:
        Catalog(session).resolve(tags)
    assert info.value.url == f'{BASE_URL}/skills/vue'
    # Every tag finished before the failure was raised
    assert f'{BASE_URL}/skills/php' in site.requested()
    assert f'{BASE_URL}/series/alpha' in site.requested()


def test_failing_tag_is_skipped_when_not_fail_fast(session, site):
    tags = _two_tag_catalog(site)
    site.add_error(f'{BASE_URL}/skills/vue', requests.ConnectionError('refused'))

    urls = Catalog(session, fail_fast=False).resolve(tags)

    assert urls == [
        f'{BASE_URL}/lessons/beta',
        f'{BASE_URL}/series/alpha/episodes/1',
        f'{BASE_URL}/series/alpha/episodes/2',
    ]


def test_network_error_on_tag_is_fatal_by_default(session, site):
    tags = _two_tag_catalog(site)
    site.add_error(f'{BASE_URL}/skills/php', requests.ConnectionError('refused'))

    with pytest.raises(NetworkError):
        Catalog(session).resolve(tags)
