"""SecurityApi backed by pywin32

Importable on Windows only.
"""

import functools
from typing import Any, Sequence

import ntsecuritycon
import pywintypes
import win32api
import win32security

from .constants import ACCESS_MASK_MAX
from .security import AccessEntry, Dacl, SecurityApi, SecurityDescriptor, Sid, Trustee

__all__ = ["Win32SecurityApi"]

_SIGN_BIT = 0x80000000


def _to_signed(mask: int) -> int:
    """pywin32 takes access masks as signed 32-bit values"""
    return mask - (1 << 32) if mask & _SIGN_BIT else mask


def _winerror(func):
    """Convert pywintypes.error raised by func into OSError"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except pywintypes.error as e:
            # OSError picks the matching subclass from the Windows error code
            raise OSError(None, e.strerror, None, e.winerror) from e

    return wrapper


class _Win32Dacl(Dacl):
    def __init__(self, acl: Any):
        self._acl = acl

    @_winerror
    def __len__(self) -> int:
        return self._acl.GetAceCount()

    @_winerror
    def entry(self, index: int) -> AccessEntry:
        (ace_type, ace_flags), mask, sid = self._acl.GetAce(index)[:3]
        return AccessEntry(
            sid=sid,
            mask=mask & ACCESS_MASK_MAX,
            allowed=ace_type == ntsecuritycon.ACCESS_ALLOWED_ACE_TYPE,
            inherit_only=bool(ace_flags & ntsecuritycon.INHERIT_ONLY_ACE),
        )


class _Win32SecurityDescriptor(SecurityDescriptor):
    def __init__(self, sd: Any):
        self._sd = sd

    @_winerror
    def owner(self) -> Sid:
        return self._sd.GetSecurityDescriptorOwner()

    @_winerror
    def group(self) -> Sid:
        return self._sd.GetSecurityDescriptorGroup()

    @_winerror
    def dacl(self) -> Dacl:
        acl = self._sd.GetSecurityDescriptorDacl()
        if acl is None:
            # A NULL DACL grants everything to everyone, which has no
            # owner/group/other equivalent
            raise OSError(None, "security descriptor has a NULL DACL")
        return _Win32Dacl(acl)


class Win32SecurityApi(SecurityApi):
    """SecurityApi calling the Windows security functions through pywin32"""

    @_winerror
    def well_known_sid(self, trustee: Trustee) -> Sid:
        return win32security.ConvertStringSidToSid(trustee.value)

    @_winerror
    def current_user_sid(self) -> Sid:
        token = win32security.OpenProcessToken(win32api.GetCurrentProcess(), win32security.TOKEN_QUERY)
        try:
            return win32security.GetTokenInformation(token, win32security.TokenUser)[0]
        finally:
            token.Close()

    @_winerror
    def current_group_sid(self) -> Sid:
        token = win32security.OpenProcessToken(win32api.GetCurrentProcess(), win32security.TOKEN_QUERY)
        try:
            return win32security.GetTokenInformation(token, win32security.TokenPrimaryGroup)
        finally:
            token.Close()

    @_winerror
    def new_acl(self, entries: Sequence[AccessEntry]) -> Any:
        acl = win32security.ACL()
        for entry in entries:
            # No inheritance flags
            acl.AddAccessAllowedAceEx(win32security.ACL_REVISION, 0, _to_signed(entry.mask), entry.sid)
        return acl

    @_winerror
    def set_dacl(self, path: str, acl: Any) -> None:
        sec_info = win32security.DACL_SECURITY_INFORMATION | win32security.PROTECTED_DACL_SECURITY_INFORMATION
        win32security.SetNamedSecurityInfo(path, win32security.SE_FILE_OBJECT, sec_info, None, None, acl, None)

    @_winerror
    def get_security_descriptor(self, path: str) -> SecurityDescriptor:
        sec_info = (
            win32security.OWNER_SECURITY_INFORMATION
            | win32security.GROUP_SECURITY_INFORMATION
            | win32security.DACL_SECURITY_INFORMATION
        )
        sd = win32security.GetNamedSecurityInfo(path, win32security.SE_FILE_OBJECT, sec_info)
        return _Win32SecurityDescriptor(sd)
