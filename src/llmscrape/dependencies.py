"""Runtime dependency checks for the extraction providers."""

from __future__ import annotations

import importlib.util

from llmscrape.exceptions import DependencyError


def _is_module_available(module_name: str) -> bool:
    """Check whether a module can be imported.

    Args:
        module_name (str): Python module name.

    Returns:
        bool: True if import spec exists.
    """
    return importlib.util.find_spec(module_name) is not None


def _collect_missing_dependencies(modules_by_package: dict[str, str]) -> list[str]:
    """Collect missing packages for a module mapping.

    Args:
        modules_by_package (dict[str, str]): Mapping of package name -> import module.

    Returns:
        list[str]: Missing package names.
    """
    return [package for package, module in modules_by_package.items() if not _is_module_available(module)]


def ensure_hosted_dependencies() -> None:
    """Validate dependencies of the hosted (OpenAI) provider.

    Raises:
        DependencyError: If required runtime dependencies are missing.
    """
    missing = _collect_missing_dependencies({"httpx": "httpx", "openai": "openai"})
    if missing:
        raise DependencyError(missing_package=missing, message="hosted extraction")


def ensure_local_dependencies() -> None:
    """Validate dependencies of the local (llama.cpp) provider.

    Raises:
        DependencyError: If `llama-cpp-python` is not installed.
    """
    missing = _collect_missing_dependencies({"llama-cpp-python": "llama_cpp"})
    if missing:
        raise DependencyError(missing_package=missing, message="local extraction")
