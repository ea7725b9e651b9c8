import logging
from email.message import Message
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union

import requests

from .exceptions import DownloadLinkMissing, HeaderMissing, LaracastsError, NetworkError
from .models import DownloadOutcome, DownloadSummary, LessonPage
from .pages import parse_lesson_page
from .progress_manager import ProgressDisplay
from .session import LaracastsSession

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def filename_from_response(response: requests.Response) -> str:
    """The ``filename`` parameter of the Content-Disposition header, without any directory part."""
    header = response.headers.get('Content-Disposition')
    if not header:
        raise HeaderMissing(f"{response.url} sent no Content-Disposition header")

    message = Message()
    message['Content-Disposition'] = header
    filename = message.get_filename()
    if filename:
        filename = filename.replace('\\', '/').rsplit('/', 1)[-1].strip()
    if not filename or filename in ('.', '..'):
        raise HeaderMissing(f"{response.url} sent no usable filename in {header!r}")
    return filename


def content_length(response: requests.Response) -> Optional[int]:
    value = response.headers.get('Content-Length')
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


class LessonDownloader:
    """Downloads lesson videos one at a time into ``output_dir``.

    Series episodes go into a subdirectory named after the series id,
    standalone lessons straight into ``output_dir``. A file that already
    exists is never rewritten.
    """

    def __init__(self, session: LaracastsSession, output_dir: Union[str, Path],
                 progress: Optional[ProgressDisplay] = None):
        self.session = session
        self.output_dir = Path(output_dir)
        self.progress = progress or ProgressDisplay()

    def download_all(self, urls: Iterable[str]) -> DownloadSummary:
        """Download every lesson in order.

        A lesson that cannot be fetched or understood is logged and skipped.
        Local filesystem errors (other than the file already existing) are
        not caught and end the run.
        """
        urls = list(urls)
        summary = DownloadSummary()
        with self.progress:
            for index, url in enumerate(urls, start=1):
                logger.info("[%d/%d] %s", index, len(urls), url)
                try:
                    outcome = self.download_lesson(url)
                except LaracastsError as e:
                    logger.error("Skipping %s: %s", url, e)
                    outcome = DownloadOutcome.FAILED
                summary.record(outcome)
        return summary

    def download_lesson(self, url: str) -> DownloadOutcome:
        doc = self.session.fetch_document(url)
        page = parse_lesson_page(doc, self.session.base_url)
        if not page.download_url:
            raise DownloadLinkMissing(f"{url} has no download link")
        return self.download_binary(page)

    def destination_dir(self, page: LessonPage) -> Path:
        if page.series is not None:
            return self.output_dir / page.series.id
        return self.output_dir

    def download_binary(self, page: LessonPage) -> DownloadOutcome:
        with self.session.get(page.download_url, stream=True) as response:
            filename = filename_from_response(response)
            expected_size = content_length(response)

            directory = self.destination_dir(page)
            directory.mkdir(parents=True, exist_ok=True)
            dest = directory / filename

            try:
                f = open(dest, 'xb')
            except FileExistsError:
                return self._check_existing(dest, expected_size)

            try:
                with f:
                    self._stream(response, f, filename, expected_size)
            except BaseException:
                # A failed attempt leaves no file behind
                dest.unlink(missing_ok=True)
                raise

        logger.info("Downloaded %s", dest)
        return DownloadOutcome.DOWNLOADED

    def _stream(self, response: requests.Response, f: BinaryIO, filename: str,
                expected_size: Optional[int]):
        task_id = self.progress.add_task(filename, expected_size)
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
                    self.progress.advance(task_id, len(chunk))
        except requests.RequestException as e:
            raise NetworkError(response.url, e) from e
        finally:
            self.progress.remove_task(task_id)

    def _check_existing(self, dest: Path, expected_size: Optional[int]) -> DownloadOutcome:
        size = dest.stat().st_size
        if expected_size is not None and size == expected_size:
            logger.info("%s already exists (and is the same size)", dest)
            return DownloadOutcome.EXISTS

        logger.warning(
            "%s already exists with %d bytes but the server reports %s; leaving it untouched",
            dest, size, expected_size if expected_size is not None else 'an unknown size',
        )
        return DownloadOutcome.MISMATCH
