"""Installed version of the Alphabill SDK."""
from importlib import metadata

try:
    __version__ = metadata.version("alphabill-sdk")
except metadata.PackageNotFoundError:
    # source tree that was never installed
    __version__ = "0.0.0"

USER_AGENT = f"alphabill-sdk/{__version__}"
