"""Sandboxed file access - ensures image lookups stay within the managed upload directory."""

from pathlib import Path


class SandboxError(Exception):
    pass


def resolve_sandboxed_path(root: Path, relative_path: str) -> Path:
    """Resolve a relative path within root. Raises SandboxError if path escapes."""
    base = root.resolve()
    resolved = (base / relative_path).resolve()

    if not resolved.is_relative_to(base):
        raise SandboxError(f"Path '{relative_path}' escapes the sandbox")

    return resolved


def resolve_sandboxed_filename(root: Path, filename: str) -> Path:
    """Resolve a bare filename directly inside root. Subdirectories are rejected too."""
    if not filename or filename in (".", "..") or Path(filename).name != filename or "\\" in filename:
        raise SandboxError(f"Invalid filename '{filename}'")

    resolved = resolve_sandboxed_path(root, filename)
    if resolved.parent != root.resolve():
        raise SandboxError(f"Path '{filename}' escapes the sandbox")
    return resolved
