"""Permission and access mask constants"""

# File types for mode field
S_IFMT = 0o170000  # File type mask
S_IFREG = 0o100000  # Regular file
S_IFDIR = 0o040000  # Directory
S_IFLNK = 0o120000  # Symbolic link

# Permission bits
MODE_PERM = 0o777  # Bits translated to and from access masks
MODE_SPECIAL = 0o7000  # setuid, setgid, sticky; never translated

OWNER_READ = 0o400
GROUP_READ = 0o040
OTHER_READ = 0o004

OWNER_WRITE = 0o200
GROUP_WRITE = 0o020
OTHER_WRITE = 0o002

OWNER_ALL = 0o700
GROUP_ALL = 0o070
OTHER_ALL = 0o007

# Default permissions
DEFAULT_FILE_PERM = 0o644  # rw-r--r--
DEFAULT_DIR_PERM = 0o755  # rwxr-xr-x

# Windows access rights, see
# https://learn.microsoft.com/en-us/windows-hardware/drivers/ifs/access-mask
GENERIC_READ = 0x80000000
GENERIC_WRITE = 0x40000000
GENERIC_EXECUTE = 0x20000000
DELETE = 0x00010000

FILE_LIST_DIRECTORY = 0x00000001
FILE_WRITE_EA = 0x00000010
FILE_TRAVERSE = 0x00000020
FILE_DELETE_CHILD = 0x00000040

ACCESS_MASK_MAX = 0xFFFFFFFF

# Shifts moving each rwx triad onto GENERIC_READ | GENERIC_WRITE | GENERIC_EXECUTE
GENERIC_SHIFT_OWNER = 23
GENERIC_SHIFT_GROUP = 26
GENERIC_SHIFT_OTHER = 29

# Shifts moving each write bit onto DELETE
DELETE_SHIFT_OWNER = 9
DELETE_SHIFT_GROUP = 12
DELETE_SHIFT_OTHER = 15

# Directory-only shifts; negative values shift right.
# Read bit onto FILE_LIST_DIRECTORY
LIST_DIR_SHIFT_OWNER = -8
LIST_DIR_SHIFT_GROUP = -5
LIST_DIR_SHIFT_OTHER = -2

# Read bit onto FILE_TRAVERSE
TRAVERSE_SHIFT_OWNER = -3
TRAVERSE_SHIFT_GROUP = 0
TRAVERSE_SHIFT_OTHER = 3

# Write bit onto FILE_DELETE_CHILD
DELETE_CHILD_SHIFT_OWNER = -1
DELETE_CHILD_SHIFT_GROUP = 2
DELETE_CHILD_SHIFT_OTHER = 5

# Write bit onto FILE_WRITE_EA
WRITE_EA_SHIFT_OWNER = -3
WRITE_EA_SHIFT_GROUP = 0
WRITE_EA_SHIFT_OTHER = 3
