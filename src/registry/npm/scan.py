"""Installed-package discovery over a node_modules tree.

Walks nested ``node_modules`` directories breadth-first and collects the
``name`` of every installed package, including transitive and duplicated
copies. Directories are identified by their canonical path so that a physical
directory is scanned at most once, whatever path or symlink led to it.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from typing import Deque, Iterator, List, Set

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from registry.npm.manifest import read_package_name

logger = logging.getLogger(__name__)


def _canonical(path: str) -> str:
    return os.path.realpath(path)


class InstalledTreeWalker:
    """Worklist traversal of an installation tree.

    Two visited sets keyed by canonical path guard the walk: one for scanned
    ``node_modules`` directories and one for recorded package directories.
    """

    def __init__(self, node_modules_dir: str):
        self.root = node_modules_dir
        self._queue: Deque[str] = deque()
        self._scanned_dirs: Set[str] = set()
        self._recorded_dirs: Set[str] = set()
        self.names: Set[str] = set()
        self.skipped: List[str] = []

    def walk(self) -> Set[str]:
        """Run the traversal and return the distinct package names found."""
        if not os.path.isdir(self.root):
            logger.info("No %s directory at %s; no installed packages.", Constants.NODE_MODULES_DIR, self.root)
            return set()

        self._queue.append(self.root)
        while self._queue:
            scan_dir = self._queue.popleft()
            key = _canonical(scan_dir)
            if key in self._scanned_dirs:
                continue
            self._scanned_dirs.add(key)
            for candidate in self._candidates(scan_dir):
                self._record_package(candidate)

        if is_debug_enabled(logger):
            logger.debug(
                "Installed tree walked",
                extra=extra_context(
                    event="scan_complete",
                    component="tree_walker",
                    target=self.root,
                    count=len(self.names),
                    scanned=len(self._scanned_dirs),
                    skipped=len(self.skipped)
                )
            )
        return set(self.names)

    def _list(self, dir_path: str) -> List[os.DirEntry]:
        try:
            with os.scandir(dir_path) as it:
                return sorted(it, key=lambda entry: entry.name)
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", dir_path, exc)
            self.skipped.append(dir_path)
            return []

    def _resolve_link(self, entry: os.DirEntry) -> str:
        """Return the real directory behind a symlink entry, or '' when broken."""
        try:
            target = os.path.realpath(entry.path)
        except OSError:
            return ""
        if not os.path.isdir(target):
            return ""
        self._enqueue_store_of(target)
        return target

    def _enqueue_store_of(self, target: str) -> None:
        """Queue the node_modules directory that holds a linked package.

        Linked layouts (pnpm stores, workspaces) keep a package's dependencies
        as siblings of the real package directory rather than beneath it.
        """
        parent = os.path.dirname(target)
        if os.path.basename(parent).startswith(Constants.SCOPE_MARKER):
            parent = os.path.dirname(parent)
        if os.path.basename(parent) == Constants.NODE_MODULES_DIR:
            self._queue.append(parent)

    def _candidates(self, scan_dir: str) -> Iterator[str]:
        for entry in self._list(scan_dir):
            if entry.name == Constants.BIN_STUB_DIR:
                continue
            try:
                if entry.is_symlink():
                    target = self._resolve_link(entry)
                    if target:
                        yield target
                elif entry.is_dir(follow_symlinks=False):
                    if entry.name.startswith(Constants.SCOPE_MARKER):
                        yield from self._scoped_candidates(entry.path)
                    else:
                        yield entry.path
            except OSError as exc:
                logger.debug("Skipping entry %s: %s", entry.path, exc)
                self.skipped.append(entry.path)

    def _scoped_candidates(self, scope_dir: str) -> Iterator[str]:
        for entry in self._list(scope_dir):
            if entry.is_symlink():
                target = self._resolve_link(entry)
                if target:
                    yield target
            elif entry.is_dir(follow_symlinks=False):
                yield entry.path

    def _record_package(self, pkg_dir: str) -> None:
        key = _canonical(pkg_dir)
        if key in self._recorded_dirs:
            return
        self._recorded_dirs.add(key)

        result = read_package_name(key)
        if result.is_ok:
            self.names.add(result.value)
        else:
            if is_debug_enabled(logger):
                logger.debug("No package recorded for %s: %s", key, result.skip_reason)
            self.skipped.append(key)

        self._queue.append(os.path.join(key, Constants.NODE_MODULES_DIR))


def collect_installed_packages(node_modules_dir: str) -> Set[str]:
    """Collect the names of all packages installed under ``node_modules_dir``.

    Args:
        node_modules_dir: The project's top-level node_modules directory.

    Returns:
        Set of distinct package names; empty when the directory is missing.
    """
    return InstalledTreeWalker(node_modules_dir).walk()
