"""Permissions example for fsperm"""

import os
import tempfile
from datetime import datetime

import fsperm
from fsperm import perm_to_masks


def main():
    with tempfile.TemporaryDirectory() as tmpdir:
        # Create a directory tree
        print("Creating directories...")
        documents = os.path.join(tmpdir, "documents", "private")
        fsperm.mkdir_all(documents, 0o750)

        # Write a file readable by the owner only
        print("\nWriting file...")
        path = os.path.join(documents, "readme.txt")
        fsperm.write_file(path, "Hello, world!", 0o600)

        # Get file info
        print("\nFile info:")
        info = fsperm.stat(path)
        print(f"  Size: {info.st_size} bytes")
        print(f"  Mode: {oct(info.mode)}")
        print(f"  Permissions: {oct(info.perm())}")
        print(f"  Is file: {info.is_file()}")
        print(f"  Modified: {datetime.fromtimestamp(info.st_mtime).isoformat()}")

        # Share it with the group
        print("\nChanging permissions to 0o640...")
        fsperm.chmod(path, 0o640)
        print(f"  Permissions: {oct(fsperm.stat(path).perm())}")

        # Show what the permissions look like as Windows access masks
        print("\nWindows access masks for 0o640:")
        owner, group, other = perm_to_masks(0o640)
        print(f"  Owner: {owner:#010x}")
        print(f"  Group: {group:#010x}")
        print(f"  Other: {other:#010x}")

        print("\nWindows access masks for a 0o750 directory:")
        owner, group, other = perm_to_masks(0o750, is_dir=True)
        print(f"  Owner: {owner:#010x}")
        print(f"  Group: {group:#010x}")
        print(f"  Other: {other:#010x}")


if __name__ == "__main__":
    main()
