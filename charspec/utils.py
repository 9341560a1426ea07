"""
Shared file helpers for charspec.

All generated files are written with a temp-file-then-os.replace() so a
crashed or interrupted run never leaves a half-written declaration behind.
"""

import logging
import os
import tempfile

logger = logging.getLogger(__name__)


def atomic_write_text(path, text):
    """Atomically write *text* (UTF-8, ``\\n`` newlines) to *path*.

    Uses a temporary file in the same directory followed by
    ``os.replace()`` so that readers never see a partially-written file.
    Parent directories are created if they do not exist.

    Parameters
    ----------
    path : str or pathlib.Path
        Target file path.
    text : str
        Full file content.
    """
    path = str(path)
    parent = os.path.dirname(path) or "."
    os.makedirs(parent, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any failure.
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    logger.debug("Wrote %s (%d chars)", path, len(text))
