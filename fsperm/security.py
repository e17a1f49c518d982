"""Windows security API seam

The permission layer never talks to the operating system directly when
handling security descriptors. It goes through a SecurityApi, whose real
implementation lives in fsperm.win32 and whose test implementation is an
in-memory fake.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

__all__ = ["AccessEntry", "Dacl", "SecurityApi", "SecurityDescriptor", "Sid", "Trustee"]

# Opaque security identifier; PySID for pywin32, any comparable value otherwise
Sid = Any


class Trustee(Enum):
    """Well-known trustees granted access by chmod, keyed by their string SID"""

    CREATOR_OWNER = "S-1-3-0"
    CREATOR_GROUP = "S-1-3-1"
    EVERYONE = "S-1-1-0"


@dataclass(frozen=True)
class AccessEntry:
    """A single access control entry

    Attributes:
        sid: Trustee the entry applies to
        mask: Access mask, an unsigned 32-bit value
        allowed: True for access-allowed entries, False for any other type
        inherit_only: True when the entry only applies to children created
            later, granting nothing on the object itself
    """

    sid: Sid
    mask: int
    allowed: bool = True
    inherit_only: bool = False


class Dacl(ABC):
    """Discretionary access control list read from a file"""

    @abstractmethod
    def __len__(self) -> int:
        """Number of access control entries"""

    @abstractmethod
    def entry(self, index: int) -> AccessEntry:
        """Get the access control entry at index"""


class SecurityDescriptor(ABC):
    """Security descriptor read from a file"""

    @abstractmethod
    def owner(self) -> Sid:
        """Get the owner SID"""

    @abstractmethod
    def group(self) -> Sid:
        """Get the primary group SID"""

    @abstractmethod
    def dacl(self) -> Dacl:
        """Get the discretionary access control list"""


class SecurityApi(ABC):
    """Operating system capabilities used to apply and read permissions

    Implementations raise OSError (or a subclass) on failure.
    """

    @abstractmethod
    def well_known_sid(self, trustee: Trustee) -> Sid:
        """Create the SID of a well-known trustee"""

    @abstractmethod
    def current_user_sid(self) -> Sid:
        """Get the SID of the user running the current process"""

    @abstractmethod
    def current_group_sid(self) -> Sid:
        """Get the primary group SID of the current process"""

    @abstractmethod
    def new_acl(self, entries: Sequence[AccessEntry]) -> Any:
        """Build an ACL granting each entry without inheritance"""

    @abstractmethod
    def set_dacl(self, path: str, acl: Any) -> None:
        """Replace the DACL of path with acl, protected from inheritance"""

    @abstractmethod
    def get_security_descriptor(self, path: str) -> SecurityDescriptor:
        """Read the owner, group and DACL of path"""
