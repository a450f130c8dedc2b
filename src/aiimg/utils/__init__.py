"""Utility functions for aiimg."""

from aiimg.models.file import format_size

from .deps import (
    PYTHON_PACKAGES,
    check_all_dependencies,
    check_python_dependencies,
    check_system_dependencies,
    package_version,
    print_dependency_status,
)

__all__ = [
    # Formatting
    "format_size",
    # Dependency checking
    "PYTHON_PACKAGES",
    "package_version",
    "check_system_dependencies",
    "check_python_dependencies",
    "check_all_dependencies",
    "print_dependency_status",
]
