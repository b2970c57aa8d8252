"""Version information for docgen.

The version is statically defined here and should match pyproject.toml.
Build metadata (git SHA, dirty tree) is detected at runtime when available.
"""

import subprocess
from functools import lru_cache

__version__ = "0.1.0"


@lru_cache(maxsize=1)
def get_git_info() -> dict[str, str | None]:
    """Get git information for version display.

    Returns:
        Dict with 'sha' (short commit hash) and 'dirty' (bool as string)
    """
    try:
        sha = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        dirty = subprocess.run(
            ["git", "status", "--porcelain"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        return {
            "sha": sha.stdout.strip() if sha.returncode == 0 else None,
            "dirty": "true" if dirty.stdout.strip() else "false",
        }
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return {"sha": None, "dirty": None}


def get_version() -> str:
    """Get the version string."""
    return __version__


def get_full_version_string() -> str:
    """Get a human-readable version string with build info.

    Returns:
        String like "docgen 0.1.0 (abc1234, dirty)" or "docgen 0.1.0"
    """
    git_info = get_git_info()
    parts = [f"docgen {__version__}"]

    details = []
    if git_info["sha"]:
        details.append(git_info["sha"])
    if git_info["dirty"] == "true":
        details.append("dirty")

    if details:
        parts.append(f"({', '.join(details)})")

    return " ".join(parts)
