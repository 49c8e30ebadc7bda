"""Archive creation for deploy uploads."""

import io
import logging
import tarfile
from collections.abc import Sequence
from pathlib import Path
from typing import Union

from ..exceptions import DanubePackagingError

logger = logging.getLogger(__name__)

ARCHIVE_FILE_NAME = "deploy.tar.gz"

NO_FILES_MESSAGE = (
    "No files to deploy. Check your output directory and ignore patterns."
)


def build_archive(root: Union[str, Path], manifest: Sequence[str]) -> bytes:
    """Pack the manifest files into an in-memory gzip-compressed tar archive.

    Entry names are the manifest paths, so extracting the archive recreates
    the layout under ``root``. Only file entries are written; directories
    are implied by the entry names. Symbolic links are stored as links.

    Args:
        root: Packaging root
        manifest: Relative paths (forward slashes) of the files to pack

    Returns:
        Archive bytes (POSIX pax tar, gzip compressed)

    Raises:
        DanubePackagingError: If the manifest is empty
        OSError: If a file cannot be read
    """
    if not manifest:
        raise DanubePackagingError(NO_FILES_MESSAGE)

    root = Path(root)
    buffer = io.BytesIO()
    with tarfile.open(
        fileobj=buffer, mode="w:gz", format=tarfile.PAX_FORMAT
    ) as tar:
        for relative_path in manifest:
            tar.add(
                str(root.joinpath(*relative_path.split("/"))),
                arcname=relative_path,
                recursive=False,
            )

    data = buffer.getvalue()
    logger.debug(f"Built archive with {len(manifest)} file(s), {len(data)} bytes")
    return data
