"""Trustee resolution and DACL entry classification"""

import logging
from typing import Callable, List, Optional, Tuple

from .errors import FsSyscall, create_security_error
from .masks import Masks
from .security import AccessEntry, SecurityApi, SecurityDescriptor, Sid, Trustee

logger = logging.getLogger(__name__)

__all__ = ["classify_entries", "creator_resolvers", "current_user_resolvers", "resolve_entries"]

# Owner, group and other SID resolvers, in that order
Resolvers = Tuple[Callable[[], Sid], Callable[[], Sid], Callable[[], Sid]]


def creator_resolvers(api: SecurityApi) -> Resolvers:
    """Resolvers for existing objects: CREATOR OWNER, CREATOR GROUP, Everyone"""
    return (
        lambda: api.well_known_sid(Trustee.CREATOR_OWNER),
        lambda: api.well_known_sid(Trustee.CREATOR_GROUP),
        lambda: api.well_known_sid(Trustee.EVERYONE),
    )


def current_user_resolvers(api: SecurityApi) -> Resolvers:
    """Resolvers for new directories: the current user, its primary group, Everyone"""
    return (
        api.current_user_sid,
        api.current_group_sid,
        lambda: api.well_known_sid(Trustee.EVERYONE),
    )


def resolve_entries(
    resolvers: Resolvers,
    masks: Masks,
    syscall: FsSyscall,
    path: Optional[str] = None,
) -> List[AccessEntry]:
    """Build one grant entry per non-zero mask

    Trustees with a zero mask get no entry at all: an explicit empty grant is
    not the same as no entry. Every resolution failure is collected before
    raising, so a single error reports all of them.

    Args:
        resolvers: Owner, group and other SID resolvers
        masks: Owner, group and other access masks
        syscall: Operation name for error reporting
        path: Path for error reporting

    Returns:
        Entries in owner, group, other order

    Raises:
        SecurityError: If any trustee could not be resolved
    """
    entries = []
    errs: List[BaseException] = []
    for resolve, mask in zip(resolvers, masks):
        if mask == 0:
            continue

        try:
            sid = resolve()
        except OSError as e:
            errs.append(e)
            continue

        entries.append(AccessEntry(sid=sid, mask=mask))

    if errs:
        raise create_security_error("creating access control entries", syscall, path, errs)

    return entries


def classify_entries(
    api: SecurityApi,
    descriptor: SecurityDescriptor,
    syscall: FsSyscall,
    path: Optional[str] = None,
) -> Masks:
    """Accumulate the masks a DACL grants to the owner, group and others

    An entry belongs to the owner when its SID is the owner SID or CREATOR
    OWNER, to the group when its SID is the group SID or CREATOR GROUP, and
    to others otherwise. The owner is checked first. Masks of entries sharing
    a role are OR-combined. Entries that are not access-allowed, or that are
    inherit-only, are skipped.

    Raises:
        SecurityError: If any part of the descriptor could not be read
    """
    try:
        dacl = descriptor.dacl()
    except OSError as e:
        raise create_security_error("getting discretionary access control list", syscall, path, [e])

    try:
        owner = descriptor.owner()
    except OSError as e:
        raise create_security_error("getting owner sid", syscall, path, [e])

    try:
        group = descriptor.group()
    except OSError as e:
        raise create_security_error("getting group sid", syscall, path, [e])

    try:
        creator_owner = api.well_known_sid(Trustee.CREATOR_OWNER)
        creator_group = api.well_known_sid(Trustee.CREATOR_GROUP)
    except OSError as e:
        raise create_security_error("creating sid", syscall, path, [e])

    owner_mask = group_mask = other_mask = 0
    for i in range(len(dacl)):
        try:
            entry = dacl.entry(i)
        except OSError as e:
            raise create_security_error(f"getting access control entry at index {i}", syscall, path, [e])

        if not entry.allowed:
            logger.debug("skipping non-allow entry %d of %s", i, path)
            continue
        if entry.inherit_only:
            logger.debug("skipping inherit-only entry %d of %s", i, path)
            continue

        if entry.sid == owner or entry.sid == creator_owner:
            owner_mask |= entry.mask
        elif entry.sid == group or entry.sid == creator_group:
            group_mask |= entry.mask
        else:
            other_mask |= entry.mask

    return owner_mask, group_mask, other_mask
