"""Error types for permission operations"""

import errno
from typing import List, Literal, Optional, Sequence

# POSIX-style error codes raised by this package itself
FsErrorCode = Literal[
    "EINVAL",  # Invalid argument
    "EACCES",  # Security subsystem refused or failed the operation
]

# Operation names for error reporting
# mkdirall and writefile are not actual syscalls but used for convenience
FsSyscall = Literal[
    "chmod",
    "mkdir",
    "mkdirall",
    "open",
    "stat",
    "writefile",
]


class ErrnoException(Exception):
    """Exception with errno-style attributes"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        syscall: Optional[FsSyscall] = None,
        path: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.syscall = syscall
        self.path = path


class SecurityError(ErrnoException):
    """Failure inside the Windows security subsystem

    Attributes:
        stage: Short label of the failing step, e.g. 'setting security descriptor'
        causes: Every underlying error; more than one when several trustees
            failed to resolve
    """

    def __init__(
        self,
        message: str,
        stage: str,
        syscall: Optional[FsSyscall] = None,
        path: Optional[str] = None,
        causes: Sequence[BaseException] = (),
        code: str = "EACCES",
    ):
        super().__init__(message, code=code, syscall=syscall, path=path)
        self.stage = stage
        self.causes: List[BaseException] = list(causes)

    def __str__(self) -> str:
        # Keep the staged message even when errno and strerror are set
        return str(self.args[0]) if self.args else ""


def create_fs_error(
    code: FsErrorCode,
    syscall: FsSyscall,
    path: Optional[str] = None,
    message: Optional[str] = None,
) -> ErrnoException:
    """Create a filesystem error with consistent formatting

    Args:
        code: POSIX error code (e.g., 'EINVAL')
        syscall: Operation name (e.g., 'chmod')
        path: Optional path involved in the error
        message: Optional custom message (defaults to code)

    Returns:
        ErrnoException with formatted message and attributes
    """
    base = message if message else code
    suffix = f" '{path}'" if path is not None else ""
    error_message = f"{code}: {base}, {syscall}{suffix}"

    return ErrnoException(error_message, code=code, syscall=syscall, path=path)


def create_security_error(
    stage: str,
    syscall: FsSyscall,
    path: Optional[str] = None,
    causes: Sequence[BaseException] = (),
) -> SecurityError:
    """Create a security error labelled with the failing stage

    When there is a single cause that is an OSError subclass, such as
    FileNotFoundError, the returned error is also an instance of that
    subclass so callers can keep matching the usual existence and
    permission exceptions.

    Args:
        stage: Short description of the failing step
        syscall: Operation name (e.g., 'stat')
        path: Optional path involved in the error
        causes: Underlying errors; the first one becomes __cause__

    Returns:
        SecurityError with formatted message and attributes
    """
    details = "; ".join(str(c) for c in causes)
    suffix = f" '{path}'" if path is not None else ""
    error_message = f"{stage}: {details}, {syscall}{suffix}" if details else f"{stage}, {syscall}{suffix}"

    native = causes[0] if len(causes) == 1 and isinstance(causes[0], OSError) else None
    if isinstance(native, ErrnoException):
        native = None

    if native is None:
        err = SecurityError(error_message, stage=stage, syscall=syscall, path=path, causes=causes)
    else:
        # Inherit from the native exception class for backward compatibility
        cls = type(f"{type(native).__name__}SecurityError", (SecurityError, type(native)), {})
        code = errno.errorcode.get(native.errno, "EACCES") if native.errno is not None else "EACCES"
        err = cls(error_message, stage=stage, syscall=syscall, path=path, causes=causes, code=code)
        err.errno = native.errno
        err.strerror = native.strerror
        err.filename = path
        if getattr(native, "winerror", None) is not None:
            err.winerror = native.winerror

    if causes:
        err.__cause__ = causes[0]
    return err


def with_deferred(err: BaseException, deferred: Optional[BaseException]) -> BaseException:
    """Attach the failure of a cleanup step to the primary error

    Args:
        err: The error that triggered the cleanup
        deferred: The cleanup error, or None when the cleanup succeeded

    Returns:
        err itself, annotated with the deferred error when there is one
    """
    if deferred is None:
        return err

    err.deferred = deferred  # type: ignore[attr-defined]
    err.add_note(f"deferred: {deferred}")
    return err
