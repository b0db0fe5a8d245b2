"""package.json reading and writing."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List

from constants import Constants
from versioning.models import ItemResult

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when package.json cannot be read, parsed or written."""


def manifest_path(dir_path: str) -> str:
    return os.path.join(dir_path, Constants.PACKAGE_JSON_FILE)


def read_manifest(dir_path: str) -> Dict[str, Any]:
    """Load package.json from ``dir_path``.

    Raises:
        ManifestError: missing file, I/O failure, invalid JSON or a top-level
            value that is not an object.
    """
    path = manifest_path(dir_path)
    try:
        with open(path, "r", encoding="utf-8") as file:
            data = json.load(file)
    except FileNotFoundError as e:
        raise ManifestError(f"{path} not found") from e
    except (IOError, UnicodeDecodeError) as e:
        raise ManifestError(f"Couldn't read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ManifestError(f"Couldn't parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"{path} does not contain a JSON object")
    for name in Constants.DIRECT_SECTIONS + [Constants.OVERRIDES_SECTION]:
        if name in data and not isinstance(data[name], dict):
            raise ManifestError(f"'{name}' in {path} is not an object")
    return data


def write_manifest(dir_path: str, manifest: Dict[str, Any]) -> str:
    """Serialize ``manifest`` back to package.json with 2-space indentation.

    Returns:
        The path written.

    Raises:
        ManifestError: on I/O failure.
    """
    path = manifest_path(dir_path)
    body = json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(body)
    except (IOError, OSError) as e:
        raise ManifestError(f"Couldn't write {path}: {e}") from e
    logger.info("Updated %s", path)
    return path


def section(manifest: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a dependency section, or an empty mapping when absent or malformed."""
    value = manifest.get(name)
    return value if isinstance(value, dict) else {}


def direct_dependency_names(manifest: Dict[str, Any]) -> List[str]:
    """Names declared in any direct section, in manifest order, without duplicates."""
    names: List[str] = []
    seen = set()
    for name in Constants.DIRECT_SECTIONS:
        for pkg_name in section(manifest, name):
            if pkg_name not in seen:
                seen.add(pkg_name)
                names.append(pkg_name)
    return names


def sections_declaring(manifest: Dict[str, Any], pkg_name: str) -> List[str]:
    return [name for name in Constants.DIRECT_SECTIONS if pkg_name in section(manifest, name)]


def read_package_name(pkg_dir: str) -> ItemResult[str]:
    """Read the ``name`` field of an installed package's package.json.

    Never raises; missing or malformed manifests come back as skips.
    """
    try:
        with open(manifest_path(pkg_dir), "r", encoding="utf-8") as file:
            data = json.load(file)
    except FileNotFoundError:
        return ItemResult.skip("no package.json")
    except (OSError, UnicodeDecodeError, ValueError) as e:
        return ItemResult.skip(f"unreadable package.json: {e}")
    name = data.get("name") if isinstance(data, dict) else None
    if not isinstance(name, str) or not name:
        return ItemResult.skip("package.json has no name")
    return ItemResult.ok(name)
