"""Shared fixtures: an in-memory SecurityApi standing in for Windows"""

import os
from typing import Dict, List, Optional, Sequence

import pytest

from fsperm import AccessEntry, Dacl, Permissions, PermissionsOptions, SecurityApi, SecurityDescriptor, Trustee

OWNER_SID = "S-1-5-21-1004336348-1177238915-682003330-1000"
GROUP_SID = "S-1-5-21-1004336348-1177238915-682003330-513"


class FakeDacl(Dacl):
    def __init__(self, entries: Sequence[AccessEntry], failures: Dict[str, OSError]):
        self._entries = list(entries)
        self._failures = failures

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, index: int) -> AccessEntry:
        if "entry" in self._failures:
            raise self._failures["entry"]
        return self._entries[index]


class FakeSecurityDescriptor(SecurityDescriptor):
    def __init__(self, owner: str, group: str, dacl: FakeDacl, failures: Dict[str, OSError]):
        self._owner = owner
        self._group = group
        self._dacl = dacl
        self._failures = failures

    def owner(self) -> str:
        if "owner" in self._failures:
            raise self._failures["owner"]
        return self._owner

    def group(self) -> str:
        if "group" in self._failures:
            raise self._failures["group"]
        return self._group

    def dacl(self) -> FakeDacl:
        if "dacl" in self._failures:
            raise self._failures["dacl"]
        return self._dacl


class FakeSecurityApi(SecurityApi):
    """SecurityApi keeping DACLs in a dict keyed by absolute path

    SIDs are their string form. Any method can be made to fail by putting
    an error into failures under the method name; well_known_sid failures
    are keyed as 'well_known_sid:<TRUSTEE>'.
    """

    def __init__(self):
        self.dacls: Dict[str, List[AccessEntry]] = {}
        self.failures: Dict[str, OSError] = {}
        self.set_calls = 0

    def _check(self, name: str) -> None:
        if name in self.failures:
            raise self.failures[name]

    def well_known_sid(self, trustee: Trustee) -> str:
        self._check(f"well_known_sid:{trustee.name}")
        return trustee.value

    def current_user_sid(self) -> str:
        self._check("current_user_sid")
        return OWNER_SID

    def current_group_sid(self) -> str:
        self._check("current_group_sid")
        return GROUP_SID

    def new_acl(self, entries: Sequence[AccessEntry]) -> List[AccessEntry]:
        self._check("new_acl")
        return list(entries)

    def set_dacl(self, path: str, acl: List[AccessEntry]) -> None:
        self._check("set_dacl")
        self.set_calls += 1
        self.dacls[os.path.abspath(path)] = list(acl)

    def get_security_descriptor(self, path: str) -> FakeSecurityDescriptor:
        self._check("get_security_descriptor")
        entries = self.dacls.get(os.path.abspath(path), [])
        return FakeSecurityDescriptor(OWNER_SID, GROUP_SID, FakeDacl(entries, self.failures), self.failures)

    def dacl_of(self, path: str) -> Optional[List[AccessEntry]]:
        return self.dacls.get(os.path.abspath(path))


@pytest.fixture
def security() -> FakeSecurityApi:
    return FakeSecurityApi()


@pytest.fixture
def win_perms(security: FakeSecurityApi) -> Permissions:
    return Permissions.open(PermissionsOptions(platform="win32", security=security))
