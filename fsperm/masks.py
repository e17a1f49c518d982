"""Translation between POSIX permission bits and Windows access masks"""

from typing import Tuple

from .constants import (
    DELETE_CHILD_SHIFT_GROUP,
    DELETE_CHILD_SHIFT_OTHER,
    DELETE_CHILD_SHIFT_OWNER,
    DELETE_SHIFT_GROUP,
    DELETE_SHIFT_OTHER,
    DELETE_SHIFT_OWNER,
    GENERIC_SHIFT_GROUP,
    GENERIC_SHIFT_OTHER,
    GENERIC_SHIFT_OWNER,
    GROUP_ALL,
    GROUP_READ,
    GROUP_WRITE,
    LIST_DIR_SHIFT_GROUP,
    LIST_DIR_SHIFT_OTHER,
    LIST_DIR_SHIFT_OWNER,
    MODE_PERM,
    OTHER_ALL,
    OTHER_READ,
    OTHER_WRITE,
    OWNER_ALL,
    OWNER_READ,
    OWNER_WRITE,
    TRAVERSE_SHIFT_GROUP,
    TRAVERSE_SHIFT_OTHER,
    TRAVERSE_SHIFT_OWNER,
    WRITE_EA_SHIFT_GROUP,
    WRITE_EA_SHIFT_OTHER,
    WRITE_EA_SHIFT_OWNER,
)

__all__ = ["Masks", "perm_to_masks", "masks_to_perm"]

# Owner, group and other access masks, in that order
Masks = Tuple[int, int, int]

# (read bit, write bit, all bits, generic shift, delete shift) per triad
_TRIADS = (
    (OWNER_READ, OWNER_WRITE, OWNER_ALL, GENERIC_SHIFT_OWNER, DELETE_SHIFT_OWNER),
    (GROUP_READ, GROUP_WRITE, GROUP_ALL, GENERIC_SHIFT_GROUP, DELETE_SHIFT_GROUP),
    (OTHER_READ, OTHER_WRITE, OTHER_ALL, GENERIC_SHIFT_OTHER, DELETE_SHIFT_OTHER),
)

# (list directory, traverse, delete child, write EA) shifts per triad
_DIR_SHIFTS = (
    (LIST_DIR_SHIFT_OWNER, TRAVERSE_SHIFT_OWNER, DELETE_CHILD_SHIFT_OWNER, WRITE_EA_SHIFT_OWNER),
    (LIST_DIR_SHIFT_GROUP, TRAVERSE_SHIFT_GROUP, DELETE_CHILD_SHIFT_GROUP, WRITE_EA_SHIFT_GROUP),
    (LIST_DIR_SHIFT_OTHER, TRAVERSE_SHIFT_OTHER, DELETE_CHILD_SHIFT_OTHER, WRITE_EA_SHIFT_OTHER),
)


def _shift(value: int, bits: int) -> int:
    """Shift left by bits, or right when bits is negative"""
    return value << bits if bits >= 0 else value >> -bits


def perm_to_masks(perm: int, is_dir: bool = False) -> Masks:
    """Convert POSIX permission bits to Windows access masks

    Only the low nine bits of perm are used. For directories the read bit
    also grants listing and traversal, and the write bit also grants
    deleting children and writing extended attributes.

    Args:
        perm: Permission bits, e.g. 0o750
        is_dir: Whether the masks are meant for a directory

    Returns:
        Tuple of owner, group and other access masks

    Example:
        >>> perm_to_masks(0o200)
        (1073807360, 0, 0)
    """
    perm &= MODE_PERM
    masks = []

    for (read, write, all_bits, generic, delete), dir_shifts in zip(_TRIADS, _DIR_SHIFTS):
        mask = _shift(perm & all_bits, generic) | _shift(perm & write, delete)

        if is_dir:
            list_dir, traverse, delete_child, write_ea = dir_shifts
            mask |= _shift(perm & read, list_dir)
            mask |= _shift(perm & read, traverse)
            mask |= _shift(perm & write, delete_child)
            mask |= _shift(perm & write, write_ea)

        masks.append(mask)

    owner, group, other = masks
    return owner, group, other


def masks_to_perm(owner: int, group: int, other: int) -> int:
    """Convert Windows access masks to POSIX permission bits

    Directory-only rights are not consulted, so the conversion is exact
    only for masks produced by perm_to_masks().

    Args:
        owner: Access mask granted to the owner
        group: Access mask granted to the primary group
        other: Access mask granted to everyone else

    Returns:
        Permission bits in the range 0..0o777
    """
    perm = 0
    for mask, (_, write, all_bits, generic, delete) in zip((owner, group, other), _TRIADS):
        perm |= ((mask >> generic) & all_bits) | ((mask >> delete) & write)

    return perm
