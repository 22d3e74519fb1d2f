"""Static asset mirror: recursive copy of the image tree into the output"""

import logging
import shutil
from pathlib import Path

from sitepipe.core.errors import OutputError


logger = logging.getLogger(__name__)


def mirror_tree(source: Path, destination: Path) -> int:
    """Copy every file under source to the same relative path under destination.

    Nested directories of any depth are recreated. A missing source copies
    nothing and is not an error. Returns the number of files copied.
    """
    if not source.is_dir():
        logger.info("no asset directory at %s, skipping", source)
        return 0

    copied = 0
    for src in sorted(source.rglob('*')):
        dest = destination / src.relative_to(source)
        try:
            if src.is_dir():
                dest.mkdir(parents=True, exist_ok=True)
            else:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(src, dest)
                copied += 1
        except OSError as e:
            raise OutputError("assets", dest, e) from e

    logger.info("mirrored %d asset(s) from %s", copied, source)
    return copied
