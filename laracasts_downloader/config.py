import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError

# Look for .env in the current working directory first, then package directory as fallback
ENV_FILE = Path.cwd() / '.env' if (Path.cwd() / '.env').exists() else Path(__file__).parent / '.env'

DEFAULT_BASE_URL = 'https://laracasts.com'
DEFAULT_MANIFEST = 'lessons.txt'

TRUTHY = ('1', 'true', 'yes', 'on')


def load_env(file_path: Optional[Path] = None):
    """Load environment variables from .env file if it exists, otherwise skip gracefully"""
    file_path = file_path or ENV_FILE
    if file_path.exists():
        with file_path.open('r', encoding='utf-8') as f:
            for raw_line in f:
                line = raw_line.strip()
                if not line or line.startswith('#') or '=' not in line:
                    continue
                name, value = line.split('=', 1)
                value = value.strip().strip('"').strip("'")
                # Variables exported by the shell win over the .env file
                os.environ.setdefault(name.strip(), value)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in TRUTHY


@dataclass
class Settings:
    username: str
    password: str
    output_dir: str = '.'
    base_url: str = DEFAULT_BASE_URL
    manifest_path: str = DEFAULT_MANIFEST
    # Seconds per request; None waits forever
    request_timeout: Optional[float] = 60.0
    # A dead tag page aborts the whole crawl unless this is off
    fail_fast_tags: bool = True
    show_progress: bool = True
    debug: bool = False

    @classmethod
    def from_env(cls, **overrides):
        """Build settings from the environment (and .env), letting explicit non-None overrides win."""
        load_env()

        timeout_raw = os.getenv('REQUEST_TIMEOUT', '60')
        try:
            timeout = float(timeout_raw) if timeout_raw else 0.0
        except ValueError:
            raise ConfigurationError(f"REQUEST_TIMEOUT must be a number of seconds, got {timeout_raw!r}")

        values = dict(
            username=os.getenv('LARACASTS_USERNAME', ''),
            password=os.getenv('LARACASTS_PASSWORD', ''),
            output_dir=os.getenv('OUTPUT_DIR', '.'),
            base_url=os.getenv('BASE_URL', DEFAULT_BASE_URL).rstrip('/'),
            manifest_path=os.getenv('MANIFEST_FILE', DEFAULT_MANIFEST),
            request_timeout=timeout or None,
            fail_fast_tags=_flag('FAIL_FAST_TAGS', 'true'),
            debug=_flag('DEBUG', 'false'),
        )
        values.update({key: value for key, value in overrides.items() if value is not None})

        settings = cls(**values)
        settings.validate()
        return settings

    def validate(self):
        if not self.username or not self.password:
            raise ConfigurationError(
                'Username and password not set. Pass them as arguments or set '
                'LARACASTS_USERNAME and LARACASTS_PASSWORD.'
            )
        if not self.base_url.startswith(('http://', 'https://')):
            raise ConfigurationError(f"BASE_URL must be an http(s) URL, got {self.base_url!r}")
