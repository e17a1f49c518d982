"""Cross-platform permission operations"""

import logging
import os
import stat as stat_module
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .constants import DEFAULT_DIR_PERM, DEFAULT_FILE_PERM, MODE_PERM, S_IFDIR, S_IFLNK, S_IFMT, S_IFREG
from .errors import FsSyscall, create_security_error, with_deferred
from .guards import PathLike, assert_valid_perm, normalize_path
from .masks import masks_to_perm, perm_to_masks
from .security import SecurityApi
from .trustees import Resolvers, classify_entries, creator_resolvers, current_user_resolvers, resolve_entries

logger = logging.getLogger(__name__)

__all__ = [
    "FileInfo",
    "Permissions",
    "PermissionsOptions",
    "PosixPermissions",
    "WindowsPermissions",
    "chmod",
    "mkdir",
    "mkdir_all",
    "open_file",
    "stat",
    "write_file",
]


class FileInfo:
    """File information whose mode reflects the platform's permissions

    Wraps the os.stat_result of the file and overrides only the mode; every
    other attribute (st_size, st_mtime, ...) is read from the wrapped value.

    Attributes:
        path: Path the information was read from
        mode: File type bits combined with the permission bits
    """

    def __init__(self, path: str, stat_result: os.stat_result, mode: int):
        self.path = path
        self.mode = mode
        self._stat = stat_result

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes FileInfo itself does not define
        if name == "_stat":
            raise AttributeError(name)
        return getattr(self._stat, name)

    def __repr__(self) -> str:
        return f"FileInfo(path={self.path!r}, mode={self.mode:#o})"

    @property
    def st_mode(self) -> int:
        return self.mode

    @property
    def name(self) -> str:
        """Base name of the file"""
        return os.path.basename(self.path)

    def perm(self) -> int:
        """Get only the rwx permission bits"""
        return self.mode & MODE_PERM

    def is_file(self) -> bool:
        """Check if this is a regular file"""
        return (self.mode & S_IFMT) == S_IFREG

    def is_directory(self) -> bool:
        """Check if this is a directory"""
        return (self.mode & S_IFMT) == S_IFDIR

    def is_symbolic_link(self) -> bool:
        """Check if this is a symbolic link"""
        return (self.mode & S_IFMT) == S_IFLNK


@dataclass
class PermissionsOptions:
    """Configuration options for selecting a permissions backend

    Attributes:
        platform: Platform to target, defaults to sys.platform.
            - 'win32': permissions are translated to and from DACLs
            - anything else: permissions are passed to the os module unchanged
        security: Security API used on Windows. Defaults to the pywin32
            implementation; tests pass a fake.
    """

    platform: str = field(default_factory=lambda: sys.platform)
    security: Optional[SecurityApi] = None


class Permissions(ABC):
    """File operations that honor POSIX-style permissions on every platform"""

    @staticmethod
    def open(options: Optional[PermissionsOptions] = None) -> "Permissions":
        """Open the permissions backend for a platform

        Args:
            options: Configuration options, defaults describe the running platform

        Returns:
            WindowsPermissions on Windows, PosixPermissions elsewhere

        Example:
            >>> perms = Permissions.open(PermissionsOptions(platform='linux'))
            >>> type(perms).__name__
            'PosixPermissions'
        """
        if options is None:
            options = PermissionsOptions()

        if options.platform != "win32":
            return PosixPermissions()

        security = options.security
        if security is None:
            from .win32 import Win32SecurityApi

            security = Win32SecurityApi()

        return WindowsPermissions(security)

    def chmod(self, path: PathLike, perm: int) -> None:
        """Change the permissions of an existing file or directory

        Args:
            path: Path to the file or directory
            perm: Permission bits, e.g. 0o640
        """
        path = normalize_path(path)
        assert_valid_perm(perm, "chmod", path)
        self._chmod(path, perm)

    def mkdir(self, path: PathLike, perm: int = DEFAULT_DIR_PERM) -> None:
        """Create a directory with the given permissions

        Raises:
            FileExistsError: If path already exists
        """
        path = normalize_path(path)
        assert_valid_perm(perm, "mkdir", path)
        self._mkdir(path, perm)

    def mkdir_all(self, path: PathLike, perm: int = DEFAULT_DIR_PERM) -> None:
        """Create a directory and any missing parents with the given permissions

        Directories that already exist are left untouched.
        """
        path = normalize_path(path)
        assert_valid_perm(perm, "mkdirall", path)
        self._mkdir_all(path, perm)

    def open_file(self, path: PathLike, flags: int, perm: int = DEFAULT_FILE_PERM) -> int:
        """Open a file like os.open(), applying perm when the file gets created

        Returns:
            File descriptor
        """
        path = normalize_path(path)
        assert_valid_perm(perm, "open", path)
        return self._open_file(path, flags, perm)

    def write_file(
        self,
        path: PathLike,
        data: Union[str, bytes],
        perm: int = DEFAULT_FILE_PERM,
        encoding: str = "utf-8",
    ) -> None:
        """Write data to a file, creating it with perm or truncating it

        Args:
            path: Path to the file
            data: Content to write (string or bytes)
            perm: Permission bits applied when the file is created
            encoding: Text encoding (default: 'utf-8')

        Example:
            >>> perms.write_file('config.json', '{"key": "value"}', 0o600)
        """
        path = normalize_path(path)
        assert_valid_perm(perm, "writefile", path)
        if isinstance(data, str):
            data = data.encode(encoding)

        flags = os.O_CREAT | os.O_WRONLY | os.O_TRUNC | getattr(os, "O_BINARY", 0)
        file = os.fdopen(self._open_file(path, flags, perm), "wb")
        try:
            file.write(data)
        except BaseException as e:
            raise with_deferred(e, _close(file))
        file.close()

    def stat(self, path: PathLike) -> FileInfo:
        """Get file information with the mode reflecting the platform's permissions"""
        return self._stat(normalize_path(path))

    @abstractmethod
    def _chmod(self, path: str, perm: int) -> None: ...

    @abstractmethod
    def _mkdir(self, path: str, perm: int) -> None: ...

    def _mkdir_all(self, path: str, perm: int) -> None:
        # Every missing ancestor gets perm, unlike os.makedirs()
        path = os.path.abspath(path)

        missing = []
        current = path
        while not os.path.isdir(current):
            missing.append(current)
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent

        for directory in reversed(missing):
            try:
                self._mkdir(directory, perm)
            except FileExistsError:
                if not os.path.isdir(directory):
                    raise

    @abstractmethod
    def _open_file(self, path: str, flags: int, perm: int) -> int: ...

    @abstractmethod
    def _stat(self, path: str) -> FileInfo: ...


class PosixPermissions(Permissions):
    """Permissions backed directly by the native POSIX mode bits"""

    def _chmod(self, path: str, perm: int) -> None:
        os.chmod(path, perm)

    def _mkdir(self, path: str, perm: int) -> None:
        os.mkdir(path, perm)

    def _open_file(self, path: str, flags: int, perm: int) -> int:
        return os.open(path, flags, perm)

    def _stat(self, path: str) -> FileInfo:
        st = os.stat(path)
        return FileInfo(path, st, st.st_mode)


class WindowsPermissions(Permissions):
    """Permissions translated to and from Windows DACLs

    chmod grants to CREATOR OWNER, CREATOR GROUP and Everyone; new
    directories grant to the current user, its primary group and Everyone.
    Either way the DACL is replaced entirely and protected from inheritance.
    """

    def __init__(self, security: SecurityApi):
        self._security = security

    def _chmod(self, path: str, perm: int, syscall: FsSyscall = "chmod") -> None:
        st = os.stat(path)
        self._apply(path, perm, stat_module.S_ISDIR(st.st_mode), creator_resolvers(self._security), syscall)

    def _apply(self, path: str, perm: int, is_dir: bool, resolvers: Resolvers, syscall: FsSyscall) -> None:
        masks = perm_to_masks(perm, is_dir)
        entries = resolve_entries(resolvers, masks, syscall, path)

        try:
            acl = self._security.new_acl(entries)
        except OSError as e:
            raise create_security_error("creating access control list", syscall, path, [e])

        try:
            self._security.set_dacl(path, acl)
        except OSError as e:
            raise create_security_error("setting security descriptor", syscall, path, [e])

        logger.debug(
            "set dacl on %s for %#o: owner=%#010x group=%#010x other=%#010x",
            path,
            perm & MODE_PERM,
            *masks,
        )

    def _mkdir(self, path: str, perm: int) -> None:
        path = os.path.abspath(path)
        os.mkdir(path, perm)

        try:
            self._apply(path, perm, True, current_user_resolvers(self._security), "mkdir")
        except Exception as e:
            logger.debug("removing %s after failing to set its permissions", path)
            raise with_deferred(e, _remove(path))

    def _open_file(self, path: str, flags: int, perm: int) -> int:
        # Only change permissions of files created by this call
        if flags & os.O_CREAT == 0:
            return os.open(path, flags, perm)

        try:
            os.stat(path)
            created = False
        except FileNotFoundError:
            created = True

        fd = os.open(path, flags, perm)
        if not created:
            return fd

        try:
            self._chmod(path, perm, "open")
        except Exception as e:
            raise with_deferred(e, _close_fd(fd))

        return fd

    def _stat(self, path: str) -> FileInfo:
        st = os.stat(path)

        try:
            descriptor = self._security.get_security_descriptor(path)
        except OSError as e:
            raise create_security_error("getting security descriptor", "stat", path, [e])

        perm = masks_to_perm(*classify_entries(self._security, descriptor, "stat", path))
        logger.debug("recovered %#o from dacl of %s", perm, path)

        return FileInfo(path, st, perm | (st.st_mode & ~MODE_PERM))


def _remove(path: str) -> Optional[BaseException]:
    """Remove an empty directory, returning the error instead of raising it"""
    try:
        os.rmdir(path)
    except OSError as e:
        logger.warning("failed to remove %s: %s", path, e)
        return e
    return None


def _close(file: Any) -> Optional[BaseException]:
    """Close a file object, returning the error instead of raising it"""
    try:
        file.close()
    except OSError as e:
        return e
    return None


def _close_fd(fd: int) -> Optional[BaseException]:
    """Close a file descriptor, returning the error instead of raising it"""
    try:
        os.close(fd)
    except OSError as e:
        return e
    return None


# Backend for the running platform, chosen once at import
_default = Permissions.open()


def chmod(path: PathLike, perm: int) -> None:
    """Change permissions using the backend for the running platform"""
    _default.chmod(path, perm)


def mkdir(path: PathLike, perm: int = DEFAULT_DIR_PERM) -> None:
    """Create a directory using the backend for the running platform"""
    _default.mkdir(path, perm)


def mkdir_all(path: PathLike, perm: int = DEFAULT_DIR_PERM) -> None:
    """Create a directory tree using the backend for the running platform"""
    _default.mkdir_all(path, perm)


def open_file(path: PathLike, flags: int, perm: int = DEFAULT_FILE_PERM) -> int:
    """Open a file using the backend for the running platform"""
    return _default.open_file(path, flags, perm)


def write_file(path: PathLike, data: Union[str, bytes], perm: int = DEFAULT_FILE_PERM) -> None:
    """Write a file using the backend for the running platform"""
    _default.write_file(path, data, perm)


def stat(path: PathLike) -> FileInfo:
    """Get file information using the backend for the running platform"""
    return _default.stat(path)
