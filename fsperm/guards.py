"""Guard functions for permission operations validation"""

import os
from typing import Union

from .constants import MODE_PERM, MODE_SPECIAL
from .errors import FsSyscall, create_fs_error

PathLike = Union[str, "os.PathLike[str]"]


def normalize_path(path: PathLike) -> str:
    """Convert a path-like object to a plain string path"""
    return os.fspath(path)


def assert_valid_perm(perm: int, syscall: FsSyscall, path: str) -> None:
    """Assert that perm is an integer holding only permission and special bits"""
    if isinstance(perm, bool) or not isinstance(perm, int):
        raise create_fs_error(
            code="EINVAL",
            syscall=syscall,
            path=path,
            message=f"permission must be an integer, got {type(perm).__name__}",
        )
    if perm < 0 or perm & ~(MODE_PERM | MODE_SPECIAL):
        raise create_fs_error(
            code="EINVAL",
            syscall=syscall,
            path=path,
            message=f"permission {perm:#o} out of range",
        )
