"""Home directory and library file locations.

Defaults to ``~/.signbank/library.json``. Override with the
``SIGNBANK_HOME`` or ``SIGNBANK_LIBRARY`` environment variables.
"""

import os
from pathlib import Path


def get_home_dir() -> Path:
    """Return the signbank home directory, creating it if needed.

    Resolution order:
        1. ``SIGNBANK_HOME`` environment variable.
        2. ``~/.signbank`` (default).

    Returns:
        Absolute path to the home directory.
    """
    home = os.environ.get("SIGNBANK_HOME")
    if home:
        home_dir = Path(home)
    else:
        home_dir = Path.home() / ".signbank"
    home_dir.mkdir(parents=True, exist_ok=True)
    return home_dir


def get_library_path() -> Path:
    """Return the default gesture library file path.

    Resolution order:
        1. ``SIGNBANK_LIBRARY`` environment variable (absolute or relative to CWD).
        2. ``{home}/library.json`` where *home* is from :func:`get_home_dir`.

    The file itself is not created.
    """
    env_val = os.environ.get("SIGNBANK_LIBRARY")
    if env_val:
        library_path = Path(env_val)
        if not library_path.is_absolute():
            library_path = Path.cwd() / library_path
        return library_path
    return get_home_dir() / "library.json"
