"""
Users file writer.

The file is written to a temporary file next to the destination and then
renamed over it, so readers and the watcher never see a half-written file.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Mapping, Union

from .errors import WriteError

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o600


def format_entries(users: Mapping[str, str]) -> str:
    """Render ``username:hash`` lines, one per user, newline terminated."""
    return "".join(f"{username}:{hash}\n" for username, hash in users.items())


def write_file(users: Mapping[str, str], path: Union[str, Path]) -> None:
    """
    Atomically replace the users file.

    Args:
        users: Snapshot or any mapping of username to hash
        path: Destination users file

    Raises:
        WriteError: If the temporary file cannot be written or renamed
    """
    path = Path(path).absolute()
    content = format_entries(users)

    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mode = DEFAULT_FILE_MODE
    except OSError as e:
        raise WriteError(
            f"could not write file [{path}], please check file permissions", path
        ) from e

    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise WriteError(
            f"could not write file [{path}], please check file permissions", path
        ) from e
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                logger.warning(f"Failed to remove temporary file {tmp_path}")

    logger.info(f"Wrote {len(users)} users to {path}")
