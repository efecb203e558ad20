# gateway/__init__.py

"""
NextCloud FTP Gateway package.

`__version__` comes from the top-level `VERSION` file in a source
checkout, otherwise from the installed distribution's metadata.
"""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "nextcloud-ftp-gateway"


def _read_version() -> str:
	version_file = Path(__file__).resolve().parent.parent / "VERSION"
	if version_file.is_file():
		return version_file.read_text(encoding="utf-8").strip()
	try:
		return version(DISTRIBUTION_NAME)
	except PackageNotFoundError:
		return "0.0.0"


__version__ = _read_version()
