"""Shared fixtures."""

import copy
import json

import pytest

from constants import Constants


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo any Constants mutation made by config or CLI overrides."""
    saved = {
        key: copy.deepcopy(value)
        for key, value in vars(Constants).items()
        if not key.startswith("__")
    }
    yield
    for key, value in saved.items():
        setattr(Constants, key, value)


def write_package(pkg_dir, name=None, **fields):
    """Create ``pkg_dir`` with a package.json declaring ``name``."""
    pkg_dir.mkdir(parents=True, exist_ok=True)
    body = dict(fields)
    if name is not None:
        body["name"] = name
    (pkg_dir / "package.json").write_text(json.dumps(body), encoding="utf-8")
    return pkg_dir
