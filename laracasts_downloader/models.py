from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Tag:
    """A catalog category page. Two tags are the same tag when their URLs match."""
    name: str = field(compare=False)
    url: str


@dataclass(frozen=True)
class Series:
    id: str
    name: str
    url: str


@dataclass(frozen=True)
class LessonPage:
    """What a lesson page tells us: the series it belongs to (if any) and where the video lives."""
    series: Optional[Series]
    download_url: Optional[str]


class LinkKind(Enum):
    LESSON = 'lesson'
    EPISODE = 'episode'
    SERIES = 'series'
    OTHER = 'other'


class DownloadOutcome(Enum):
    DOWNLOADED = 'downloaded'
    EXISTS = 'exists'
    MISMATCH = 'mismatch'
    FAILED = 'failed'


@dataclass
class DownloadSummary:
    downloaded: int = 0
    exists: int = 0
    mismatch: int = 0
    failed: int = 0

    def record(self, outcome: DownloadOutcome):
        attr = outcome.value
        setattr(self, attr, getattr(self, attr) + 1)

    @property
    def total(self) -> int:
        return self.downloaded + self.exists + self.mismatch + self.failed
