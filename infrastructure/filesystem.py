"""Local filesystem operations used by indexing and renaming.

`move` refuses to overwrite an existing target and raises on failure.
Timestamp setters are best-effort: they return False instead of raising.
Setting the creation time is only possible on Windows (Win32 `SetFileTime`).
"""

from __future__ import annotations

import ctypes
from datetime import datetime
import errno
import os

from loguru import logger

from core.services.interfaces import IFileSystem

# Seconds between 1601-01-01 (FILETIME epoch) and 1970-01-01
_FILETIME_EPOCH_OFFSET = 11644473600
_FILE_WRITE_ATTRIBUTES = 0x100
_FILE_SHARE_ALL = 0x1 | 0x2 | 0x4
_OPEN_EXISTING = 3
_FILE_FLAG_BACKUP_SEMANTICS = 0x02000000
# Filesystems that cannot hard-link fall back to a checked rename
_NO_HARDLINK_ERRNOS = (errno.EPERM, errno.EXDEV, errno.ENOTSUP, errno.EMLINK, errno.EACCES)


class LocalFileSystem(IFileSystem):
    """`IFileSystem` backed by the operating system."""

    def list_files(self, directory: str) -> list[str]:
        """Return full paths of regular files directly inside `directory`."""
        with os.scandir(directory) as it:
            return [entry.path for entry in it if entry.is_file()]

    def list_dirs(self, directory: str) -> list[str]:
        """Return full paths of sub-directories directly inside `directory`."""
        try:
            with os.scandir(directory) as it:
                return [entry.path for entry in it if entry.is_dir(follow_symlinks=False)]
        except OSError as ex:
            logger.warning("Cannot list {}: {}", directory, ex)
            return []

    def exists(self, path: str) -> bool:
        """Return True if `path` exists (broken symlinks included)."""
        return os.path.lexists(path)

    def move(self, src: str, dst: str) -> None:
        """Move `src` to `dst` without ever replacing an existing `dst`.

        Raises:
            FileExistsError: `dst` already exists.
            OSError: any other failure of the underlying rename.
        """
        if os.name == "nt":
            # Windows rename never replaces an existing target
            os.rename(src, dst)
            return
        try:
            # link() fails atomically when dst exists
            os.link(src, dst)
        except FileExistsError:
            raise
        except OSError as ex:
            if ex.errno not in _NO_HARDLINK_ERRNOS:
                raise
            if os.path.lexists(dst):
                raise FileExistsError(errno.EEXIST, "Target already exists", dst) from ex
            os.rename(src, dst)
            return
        try:
            os.unlink(src)
        except OSError:
            # Leave the filesystem as it was before the move
            os.unlink(dst)
            raise

    def set_creation_time(self, path: str, value: datetime) -> bool:
        """Set the creation time of `path` where the platform allows it."""
        if os.name != "nt":
            return False
        try:
            return _set_windows_creation_time(path, value)
        except (OSError, ValueError, OverflowError, AttributeError) as ex:
            logger.debug("SetFileTime failed for {}: {}", path, ex)
            return False

    def set_last_write_time(self, path: str, value: datetime) -> bool:
        """Set the modification time of `path`, keeping its access time."""
        try:
            st = os.stat(path)
            os.utime(path, (st.st_atime, value.timestamp()))
            return True
        except (OSError, ValueError, OverflowError) as ex:
            logger.debug("utime failed for {}: {}", path, ex)
            return False

    def get_creation_time(self, path: str) -> datetime | None:
        """Best-effort file creation time.

        Uses the birth time when the platform records it (Windows, macOS).
        Elsewhere falls back to `st_mtime`: `st_ctime` changes on every
        rename, while a move leaves the modification time untouched.
        """
        try:
            st = os.stat(path)
            ts = getattr(st, "st_birthtime", None)
            if ts is None:
                ts = st.st_mtime
            return datetime.fromtimestamp(ts)
        except (OSError, ValueError, OverflowError) as ex:
            logger.debug("stat failed for {}: {}", path, ex)
            return None


def _set_windows_creation_time(path: str, value: datetime) -> bool:
    """Call Win32 `SetFileTime` with only the creation time set."""
    from ctypes import wintypes  # pylint: disable=import-outside-toplevel

    kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
    create_file = kernel32.CreateFileW
    create_file.argtypes = [
        wintypes.LPCWSTR,
        wintypes.DWORD,
        wintypes.DWORD,
        ctypes.c_void_p,
        wintypes.DWORD,
        wintypes.DWORD,
        wintypes.HANDLE,
    ]
    create_file.restype = wintypes.HANDLE
    set_file_time = kernel32.SetFileTime
    set_file_time.argtypes = [
        wintypes.HANDLE,
        ctypes.POINTER(wintypes.FILETIME),
        ctypes.POINTER(wintypes.FILETIME),
        ctypes.POINTER(wintypes.FILETIME),
    ]
    set_file_time.restype = wintypes.BOOL

    intervals = int((value.timestamp() + _FILETIME_EPOCH_OFFSET) * 10_000_000)
    created = wintypes.FILETIME(intervals & 0xFFFFFFFF, intervals >> 32)

    handle = create_file(
        path,
        _FILE_WRITE_ATTRIBUTES,
        _FILE_SHARE_ALL,
        None,
        _OPEN_EXISTING,
        _FILE_FLAG_BACKUP_SEMANTICS,
        None,
    )
    invalid = wintypes.HANDLE(-1).value
    if not handle or handle == invalid:
        return False
    try:
        return bool(set_file_time(handle, ctypes.byref(created), None, None))
    finally:
        kernel32.CloseHandle(handle)
