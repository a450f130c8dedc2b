"""Dependency checking utilities."""

from __future__ import annotations

import importlib.util
import shutil
from importlib.metadata import PackageNotFoundError, version

# Distribution name -> (import name, required)
PYTHON_PACKAGES: dict[str, tuple[str, bool]] = {
    "numpy": ("numpy", True),
    "Pillow": ("PIL", True),
    "pydantic": ("pydantic", True),
    "PyYAML": ("yaml", True),
    "c2pa-python": ("c2pa", False),
}

SYSTEM_TOOLS = ["exiftool"]

HINTS = {
    "exiftool": "For MakerNote and IPTC tags: install exiftool",
    "c2pa-python": "For Content Credentials support: pip install aiimg[c2pa]",
}


def check_system_dependencies() -> dict[str, bool]:
    """Check availability of system dependencies (binaries).

    Returns:
        Dict mapping tool names to availability status.
    """
    return {tool: shutil.which(tool) is not None for tool in SYSTEM_TOOLS}


def package_version(distribution: str) -> str | None:
    """Return the installed version of a distribution, or None."""
    module, _ = PYTHON_PACKAGES.get(distribution, (distribution, False))
    if importlib.util.find_spec(module) is None:
        return None
    try:
        return version(distribution)
    except PackageNotFoundError:
        return "unknown"


def check_python_dependencies() -> dict[str, bool]:
    """Check availability of the Python packages aiimg uses.

    Returns:
        Dict mapping distribution names to availability status.
    """
    return {name: package_version(name) is not None for name in PYTHON_PACKAGES}


def check_all_dependencies() -> dict[str, dict[str, bool]]:
    """Check all dependencies.

    Returns:
        Dict with 'system' and 'python' keys containing availability dicts.
    """
    return {
        "system": check_system_dependencies(),
        "python": check_python_dependencies(),
    }


def print_dependency_status() -> None:
    """Print dependency status to stdout."""
    print("aiimg dependency status:")
    print("=" * 40)

    print("\nSystem binaries:")
    system = check_system_dependencies()
    for name, available in system.items():
        icon = "✓" if available else "✗"
        print(f"  {icon} {name}")

    print("\nPython packages:")
    missing_required = []
    for name, (_, required) in PYTHON_PACKAGES.items():
        found = package_version(name)
        icon = "✓" if found else "✗"
        kind = "required" if required else "optional"
        print(f"  {icon} {name} {found or '-'} ({kind})")
        if required and not found:
            missing_required.append(name)

    if missing_required:
        print(f"\n⚠️  Missing required packages: {', '.join(missing_required)}")
    for name, hint in HINTS.items():
        if not system.get(name, True) or (name in PYTHON_PACKAGES and not package_version(name)):
            print(f"\n💡 {hint}")
