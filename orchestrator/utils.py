"""Utility functions for the command line."""
from pathlib import Path

from rich.console import Console

err_console = Console(stderr=True)

SOURCE_SUFFIXES = (".pdf", ".txt")


def expand_source_paths(paths: tuple[str, ...]) -> list[str]:
    """Expand paths to include all syllabus files in directories.

    Args:
        paths: Tuple of file paths and/or directory paths

    Returns:
        List of PDF and text file paths with directories expanded

    Raises:
        SystemExit: If a path does not exist or a directory holds no syllabus files
    """
    source_files: list[str] = []

    for path_str in paths:
        path = Path(path_str)

        if path.is_file():
            source_files.append(path_str)
        elif path.is_dir():
            found = sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() in SOURCE_SUFFIXES)

            if not found:
                err_console.print(f"[red]Error:[/red] Directory '{path_str}' contains no PDF or text files.")
                raise SystemExit(1)

            source_files.extend(str(p) for p in found)
        else:
            err_console.print(f"[red]Error:[/red] Path '{path_str}' does not exist.")
            raise SystemExit(1)

    return source_files
