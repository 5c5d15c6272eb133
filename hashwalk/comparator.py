from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .diagnostics import debug
from .errors import ComparisonTargetHashError, ManifestHashError
from .hasher import CHUNK_SIZE, hash_file


@dataclass
class ComparisonResult:
	csv: Path
	hash: str
	compare: Optional[str] = None
	is_match: Optional[bool] = None

	def to_dict(self) -> Dict[str, Any]:
		out: Dict[str, Any] = {"csv": str(self.csv), "hash": self.hash}
		if self.compare is not None:
			out["compare"] = self.compare
			out["isMatch"] = self.is_match
		return out


def is_file(path: str) -> bool:
	try:
		return Path(path).is_file()
	except (OSError, ValueError) as e:
		debug(f"Error checking file: {e}")
		return False


def hash_manifest(manifest: Path, algorithm: str, chunk_size: int = CHUNK_SIZE) -> str:
	try:
		return hash_file(manifest, algorithm, chunk_size)
	except OSError as e:
		raise ManifestHashError(f"Unable to hash manifest {manifest}: {e}") from e


def resolve_target(target: str, algorithm: str, chunk_size: int = CHUNK_SIZE) -> str:
	"""Digest to compare against: the hash of `target` if it names a regular
	file, otherwise `target` itself as a literal checksum string."""
	candidate = os.path.abspath(target)
	if not is_file(candidate):
		debug(f"Comparing against literal checksum: {target}")
		return target
	try:
		return hash_file(candidate, algorithm, chunk_size)
	except OSError as e:
		raise ComparisonTargetHashError(f"Unable to hash comparison file {candidate}: {e}") from e


def compare(manifest: Path, algorithm: str, target: Optional[str] = None, chunk_size: int = CHUNK_SIZE) -> ComparisonResult:
	result = ComparisonResult(csv=Path(manifest), hash=hash_manifest(manifest, algorithm, chunk_size))
	if not target:
		return result
	result.compare = target
	result.is_match = result.hash == resolve_target(target, algorithm, chunk_size)
	return result
