import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Union

logger = logging.getLogger(__name__)


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


class ManifestStore:
    """Plain-text cache of resolved lesson URLs, one per line.

    The file existing at all means the catalog has already been crawled.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def write(self, urls: Iterable[str]):
        """Replace the manifest with ``urls`` in order.

        The lines go to a temporary file in the same directory which is then
        renamed over the manifest, so a crash never leaves half a manifest.
        """
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix='.tmp')
        count = 0
        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as f:
                for url in urls:
                    f.write(f"{url}\n")
                    count += 1
            # mkstemp creates the file owner-only; give it the usual umask-filtered mode
            os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("Wrote %d lesson urls to %s", count, self.path)

    def read(self) -> List[str]:
        with self.path.open('r', encoding='utf-8') as f:
            urls = [line.strip() for line in f if line.strip()]
        logger.debug("Read %d lesson urls from %s", len(urls), self.path)
        return urls

    def remove(self):
        self.path.unlink(missing_ok=True)
