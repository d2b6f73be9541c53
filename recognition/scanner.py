"""Directory scanning for files sharing a fixed title."""
import os
from pathlib import Path


def sort_key(path: Path) -> tuple[str, str]:
    """Order by file name, then full path."""
    return path.name, str(path)


def _raise(error: OSError) -> None:
    raise error


def find_matching_files(directory: Path, fixed_title: str) -> list[Path]:
    """
    Recursively find files whose name contains *fixed_title*.

    The match is case-insensitive.  Results are sorted by file name so
    the first entry does not depend on directory traversal order.

    Args:
        directory: Directory to search
        fixed_title: Title part the file names must contain

    Returns:
        Sorted list of matching file paths

    Raises:
        FileNotFoundError: If the directory does not exist
        NotADirectoryError: If the path is not a directory
        OSError: If a directory below it cannot be read
    """
    directory = Path(directory)
    if not directory.exists():
        raise FileNotFoundError(f"Directory does not exist: {directory}")
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    needle = fixed_title.lower()
    files = []
    # Unreadable subdirectories abort the scan instead of being skipped
    for root, _dirs, names in os.walk(directory, onerror=_raise):
        for name in names:
            if needle in name.lower():
                files.append(Path(root) / name)
    return sorted(files, key=sort_key)
