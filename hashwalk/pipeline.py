from __future__ import annotations
import enum
import os
from pathlib import Path
from typing import List, Optional, Union

from .comparator import ComparisonResult, hash_manifest, resolve_target
from .errors import HashWalkError, InvalidRootError, ManifestWriteError, TraversalError
from .hasher import CHUNK_SIZE, normalize_algorithm
from .manifest import manifest_path, rows, write_manifest
from .walker import walk


class Stage(str, enum.Enum):
	IDLE = "Idle"
	WALKING = "Walking"
	BUILDING_MANIFEST = "BuildingManifest"
	HASHING_MANIFEST = "HashingManifest"
	COMPARING_TARGET = "ComparingTarget"
	DONE = "Done"
	FAILED = "Failed"


class HashWalkRun:
	"""One scan: walk, write the manifest, hash it, optionally compare.

	`files` holds the sorted file list once walking finishes and `rows`
	the number of manifest rows written.
	"""

	def __init__(
		self,
		root: Union[str, Path],
		algorithm: str,
		csv_directory: Path,
		compare: Optional[str] = None,
		chunk_size: int = CHUNK_SIZE,
		timestamped_error_markers: bool = True,
	) -> None:
		self.root = os.path.abspath(os.fspath(root))
		self.algorithm = normalize_algorithm(algorithm)
		self.csv_directory = Path(csv_directory)
		self.compare = compare or None
		self.chunk_size = chunk_size
		self.timestamped_error_markers = timestamped_error_markers
		self.stage = Stage.IDLE
		self.files: List[str] = []
		self.rows = 0
		self.result: Optional[ComparisonResult] = None

	def execute(self) -> ComparisonResult:
		try:
			self._walk()
			manifest = self._build_manifest()
			self.stage = Stage.HASHING_MANIFEST
			result = ComparisonResult(csv=manifest, hash=hash_manifest(manifest, self.algorithm, self.chunk_size))
			if self.compare is not None:
				self.stage = Stage.COMPARING_TARGET
				result.compare = self.compare
				result.is_match = result.hash == resolve_target(self.compare, self.algorithm, self.chunk_size)
		except HashWalkError as e:
			e.stage = self.stage.value
			self.stage = Stage.FAILED
			raise
		self.stage = Stage.DONE
		self.result = result
		return result

	def _walk(self) -> None:
		self.stage = Stage.WALKING
		if not os.path.isdir(self.root):
			raise InvalidRootError(f"Invalid directory path: {self.root}")
		try:
			self.files = sorted(walk(self.root))
		except OSError as e:
			raise TraversalError(f"Unable to read directory: {e}") from e

	def _build_manifest(self) -> Path:
		self.stage = Stage.BUILDING_MANIFEST
		path = manifest_path(self.csv_directory, self.algorithm)
		records = rows(self.files, self.root, self.algorithm, self.chunk_size)
		try:
			self.csv_directory.mkdir(parents=True, exist_ok=True)
			self.rows = write_manifest(path, records, self.timestamped_error_markers)
		except OSError as e:
			raise ManifestWriteError(f"Unable to write manifest {path}: {e}") from e
		return path


def run(
	root: Union[str, Path],
	algorithm: str,
	csv_directory: Path,
	compare: Optional[str] = None,
	chunk_size: int = CHUNK_SIZE,
	timestamped_error_markers: bool = True,
) -> ComparisonResult:
	return HashWalkRun(root, algorithm, csv_directory, compare, chunk_size, timestamped_error_markers).execute()
