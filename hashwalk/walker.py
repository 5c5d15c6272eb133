from __future__ import annotations
import os
import stat
from pathlib import Path
from typing import List, Set, Union

from .diagnostics import debug


def _realpath(path: str) -> str:
	try:
		return os.path.realpath(path)
	except (OSError, ValueError):
		return path


def walk(root: Union[str, Path]) -> List[str]:
	"""Collect every regular file reachable from `root`, following symlinks.

	Each real directory is descended once and each real file is emitted once,
	so symlink cycles terminate and aliased files are not double counted. The
	emitted path is the one reached through the tree, not the resolved one.
	Errors listing a directory propagate; a symlink that cannot be resolved
	is skipped. Listings are visited in name order, so which alias of a
	shared file or directory gets emitted does not depend on the filesystem.
	"""
	root = os.fspath(root)
	visited: Set[str] = {_realpath(root)}
	pending: List[str] = [root]
	results: List[str] = []

	while pending:
		current = pending.pop()
		with os.scandir(current) as it:
			entries = sorted(it, key=lambda e: e.name)
		subdirs: List[str] = []
		for entry in entries:
			full_path = os.path.join(current, entry.name)
			try:
				if entry.is_symlink():
					mode = os.stat(full_path).st_mode
					is_dir = stat.S_ISDIR(mode)
					is_file = stat.S_ISREG(mode)
				else:
					is_dir = entry.is_dir(follow_symlinks=False)
					is_file = entry.is_file(follow_symlinks=False)
			except OSError as e:
				debug(f"Skipping unresolvable entry {full_path}: {e}")
				continue

			if is_dir:
				real = _realpath(full_path)
				if real in visited:
					continue
				visited.add(real)
				subdirs.append(full_path)
			elif is_file:
				real = _realpath(full_path)
				if real in visited:
					continue
				visited.add(real)
				results.append(full_path)
		# reversed so the stack yields subdirectories in name order
		pending.extend(reversed(subdirs))

	return results
