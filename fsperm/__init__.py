"""fsperm

POSIX-style file permissions that also work on Windows, where they are
translated to and from discretionary access control lists.
"""

from .errors import ErrnoException, FsErrorCode, FsSyscall, SecurityError, create_fs_error, create_security_error
from .masks import masks_to_perm, perm_to_masks
from .permissions import (
    FileInfo,
    Permissions,
    PermissionsOptions,
    PosixPermissions,
    WindowsPermissions,
    chmod,
    mkdir,
    mkdir_all,
    open_file,
    stat,
    write_file,
)
from .security import AccessEntry, Dacl, SecurityApi, SecurityDescriptor, Trustee

__version__ = "0.1.0"

__all__ = [
    "Permissions",
    "PermissionsOptions",
    "PosixPermissions",
    "WindowsPermissions",
    "FileInfo",
    "chmod",
    "mkdir",
    "mkdir_all",
    "open_file",
    "stat",
    "write_file",
    "perm_to_masks",
    "masks_to_perm",
    "SecurityApi",
    "SecurityDescriptor",
    "Dacl",
    "AccessEntry",
    "Trustee",
    "ErrnoException",
    "SecurityError",
    "FsErrorCode",
    "FsSyscall",
    "create_fs_error",
    "create_security_error",
]
