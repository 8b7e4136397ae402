"""
Cover image storage for catalogue books.

Uploaded covers are written under a generated name into one or more
asset directories. The first directory is the primary one: it is the
directory served under ``/image`` and a failure to write there means
the book gets no cover. The remaining directories are mirrors (for
example a source tree next to the deployed tree) and are kept in sync
on a best-effort basis only.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp"}
FALLBACK_EXTENSION = ".dat"
DEFAULT_FILENAME = "cover.jpg"
PUBLIC_PREFIX = "/image"


def cover_extension(original_filename: Optional[str]) -> str:
    """Return the lower-cased extension to store a cover under.

    Parameters
    ----------
    original_filename : Optional[str]
        The filename sent by the client. Missing or blank names, and names
        without a ``.`` suffix, are treated as ``cover.jpg``.

    Returns
    -------
    str
        One of ``ALLOWED_EXTENSIONS`` (with the leading dot), or
        ``FALLBACK_EXTENSION`` for anything outside the whitelist.
    """
    name = (original_filename or "").strip()
    if "." not in name:
        name = DEFAULT_FILENAME
    ext = name[name.rindex("."):].lower()
    if ext in ALLOWED_EXTENSIONS:
        return ext
    return FALLBACK_EXTENSION


class CoverStore:
    """Write cover files to the configured asset roots.

    Parameters
    ----------
    roots : Sequence[Path | str]
        Asset directories, primary first. They are created on demand.
    public_prefix : str
        URL namespace the primary root is served under.
    clock : Callable[[], float]
        Source of the current time in seconds, used for filenames.
    """

    def __init__(
        self,
        roots: Sequence[Union[Path, str]],
        public_prefix: str = PUBLIC_PREFIX,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not roots:
            raise ValueError("CoverStore needs at least one asset directory")
        self.roots: List[Path] = [Path(r) for r in roots]
        self.public_prefix = public_prefix.rstrip("/")
        self._clock = clock

    @property
    def primary_root(self) -> Path:
        return self.roots[0]

    def filename_for(self, record_id: int, original_filename: Optional[str]) -> str:
        millis = int(self._clock() * 1000)
        return f"book_{record_id}_{millis}{cover_extension(original_filename)}"

    def store(
        self,
        record_id: int,
        content: Optional[bytes],
        original_filename: Optional[str] = None,
    ) -> Optional[str]:
        """Persist an uploaded cover and return its public path.

        Returns ``None`` without touching the disk when no file (or an
        empty one) was uploaded, and ``None`` when the primary write fails.
        """
        if not content:
            return None

        filename = self.filename_for(record_id, original_filename)
        primary = self.primary_root / filename
        try:
            primary.parent.mkdir(parents=True, exist_ok=True)
            primary.write_bytes(content)
        except OSError as exc:
            logger.error("Could not save cover %s for book %s: %s", primary, record_id, exc)
            return None

        for root in self.roots[1:]:
            mirror = root / filename
            try:
                root.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(primary, mirror)
            except OSError as exc:
                logger.warning("Could not mirror cover %s to %s: %s", filename, root, exc)

        logger.info("Saved cover %s for book %s", filename, record_id)
        return f"{self.public_prefix}/{filename}"

    def resolve(self, public_path: str) -> Optional[Path]:
        """Map a ``/image/...`` path back to its file in the primary root."""
        prefix = self.public_prefix + "/"
        if not public_path.startswith(prefix):
            return None
        name = public_path[len(prefix):]
        if not name or "/" in name or name in (".", ".."):
            return None
        return self.primary_root / name
