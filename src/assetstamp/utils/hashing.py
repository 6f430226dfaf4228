"""Content hashing utilities for version tags."""

import fnmatch
import hashlib
import os
from pathlib import Path
from typing import Iterable, Iterator, Sequence


def calculate_file_hash(file_path: Path | str, chunk_size: int = 8192) -> str:
    """
    Calculate SHA-256 hash of a file.

    Args:
        file_path: Path to the file to hash
        chunk_size: Size of chunks to read (default: 8KB)

    Returns:
        Hexadecimal string representation of the SHA-256 hash (64 characters)

    Raises:
        FileNotFoundError: If the file does not exist
        IOError: If there's an error reading the file
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    if not file_path.is_file():
        raise ValueError(f"Not a file: {file_path}")

    sha256_hash = hashlib.sha256()

    with open(file_path, "rb") as f:
        # Read file in chunks to handle large files efficiently
        while chunk := f.read(chunk_size):
            sha256_hash.update(chunk)

    return sha256_hash.hexdigest()


def is_excluded(name: str, exclude: Sequence[str]) -> bool:
    """Check a single path component against glob exclusion patterns."""
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in exclude)


def iter_tree_files(
    root: Path, exclude: Sequence[str] = ()
) -> Iterator[tuple[str, Path]]:
    """
    Yield (relative posix path, absolute path) for every file under root.

    Entries are yielded in sorted relative-path order so that the walk is
    independent of filesystem enumeration order. Excluded names are pruned
    at any depth. Symlinked directories are followed and named by their
    in-tree path; a directory already walked (a cycle or a second link to
    the same target) is skipped.
    """
    found: list[tuple[str, Path]] = []
    seen = {os.path.realpath(root)}
    for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
        kept = []
        for dirname in sorted(dirnames):
            if is_excluded(dirname, exclude):
                continue
            real = os.path.realpath(os.path.join(dirpath, dirname))
            if real in seen:
                continue
            seen.add(real)
            kept.append(dirname)
        dirnames[:] = kept
        base = Path(dirpath)
        for filename in filenames:
            if is_excluded(filename, exclude):
                continue
            path = base / filename
            if not path.is_file():
                continue
            found.append((path.relative_to(root).as_posix(), path))

    found.sort(key=lambda item: item[0])
    yield from found


def calculate_digest_hash(entries: Iterable[tuple[str, str]]) -> str:
    """
    Combine (name, digest) pairs into a single SHA-256 hash.

    Pairs are sorted by name first, so callers may pass them in any order.
    Each pair contributes its name and digest separated by NUL bytes, which
    makes renames as visible as content changes.
    """
    combined = hashlib.sha256()
    for name, digest in sorted(entries):
        combined.update(name.encode("utf-8"))
        combined.update(b"\0")
        combined.update(digest.encode("ascii"))
        combined.update(b"\n")
    return combined.hexdigest()


def calculate_tree_hash(
    paths: Path | str | Iterable[Path | str], exclude: Sequence[str] = ()
) -> str:
    """
    Calculate a location-independent SHA-256 hash over files and directories.

    Directories contribute every non-excluded file beneath them, named
    relative to the directory's own name. Single files contribute their
    file name. Modification times and absolute locations never take part,
    so identical content hashes identically wherever it is installed.

    Args:
        paths: A file, a directory, or several of either
        exclude: Glob patterns matched against each path component

    Returns:
        Hexadecimal SHA-256 digest (64 characters)

    Raises:
        FileNotFoundError: If any path does not exist
    """
    if isinstance(paths, (str, Path)):
        paths = [paths]

    entries: list[tuple[str, str]] = []
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        if path.is_dir():
            for relative, file_path in iter_tree_files(path, exclude):
                entries.append(
                    (f"{path.name}/{relative}", calculate_file_hash(file_path))
                )
        else:
            entries.append((path.name, calculate_file_hash(path)))

    return calculate_digest_hash(entries)
