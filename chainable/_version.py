"""Version and system information for chainable.

This module provides version information and system diagnostics useful for:
- Bug reports and error reporting
- Debugging environment issues

Usage:
    from chainable._version import __version__, get_version_info, print_version_info

CLI Usage:
    python -m chainable --version
    python -m chainable info
"""

from __future__ import annotations

import importlib
import importlib.util
import platform
import sys
from typing import Any, Dict, Optional

__version__ = "0.3.0"


def get_python_info() -> Dict[str, str]:
    """Get Python interpreter information."""
    return {
        "version": platform.python_version(),
        "implementation": platform.python_implementation(),
        "executable": sys.executable,
    }


def get_platform_info() -> Dict[str, str]:
    """Get platform/OS information."""
    return {
        "system": platform.system(),
        "release": platform.release(),
        "machine": platform.machine(),
    }


def _get_package_version(module_name: str) -> Optional[str]:
    """Get a module's version without failing when it is missing.

    Args:
        module_name: Name of the module to import.

    Returns:
        Version string or None if not installed.
    """
    if importlib.util.find_spec(module_name) is None:
        return None
    module = importlib.import_module(module_name)
    version = getattr(module, "__version__", None)
    if version is None:
        from importlib.metadata import PackageNotFoundError, version as dist_version

        try:
            version = dist_version(module_name.replace("_", "-"))
        except PackageNotFoundError:
            return None
    return str(version)


def get_dependency_versions() -> Dict[str, Optional[str]]:
    """Get versions of the runtime dependencies."""
    return {
        "pydantic": _get_package_version("pydantic"),
        "typeguard": _get_package_version("typeguard"),
        "typing_extensions": _get_package_version("typing_extensions"),
    }


def get_version_info() -> Dict[str, Any]:
    """Get version, python, platform and dependency information.

    Example:
        >>> info = get_version_info()
        >>> info["chainable"]
        '0.3.0'
    """
    return {
        "chainable": __version__,
        "python": get_python_info(),
        "platform": get_platform_info(),
        "dependencies": get_dependency_versions(),
    }


def format_version_info(info: Optional[Dict[str, Any]] = None) -> str:
    """Format version info as a human-readable string with aligned colons."""
    if info is None:
        info = get_version_info()

    sections = [
        ("Python", [(k.capitalize(), v) for k, v in info["python"].items()]),
        ("Platform", [(k.capitalize(), v) for k, v in info["platform"].items()]),
        (
            "Dependencies",
            [(pkg, ver or "not installed") for pkg, ver in info["dependencies"].items()],
        ),
    ]
    width = max(len(label) for _, rows in sections for label, _ in rows)

    lines = [f"chainable: {info['chainable']}"]
    for title, rows in sections:
        lines.append("")
        lines.append(f"{title}:")
        for label, value in rows:
            lines.append(f"  {label:>{width}} : {value}")
    return "\n".join(lines)


def print_version_info() -> None:
    """Print version and system information to stdout."""
    print(format_version_info())
