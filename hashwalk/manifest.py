from __future__ import annotations
import csv
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Iterable, Iterator, List, Optional, Sequence

from .hasher import CHUNK_SIZE, HashResult, hash_file_result

HEADER = ("RelativePath", "FileName", "Algorithm", "Hash")


@dataclass(frozen=True)
class ChecksumRecord:
	relative_path: str
	file_name: str
	algorithm: str
	result: HashResult

	def fields(self, timestamped_errors: bool = True) -> List[str]:
		return [self.relative_path, self.file_name, self.algorithm, self.result.text(timestamped_errors)]


def csv_escape(value: str) -> str:
	# Every field is quoted, embedded quotes doubled (RFC 4180 2.6/2.7)
	return '"' + value.replace('"', '""') + '"'


def relative_posix(path: str, base_path: str) -> str:
	return PurePath(os.path.relpath(path, base_path)).as_posix()


def rows(files: Iterable[str], base_path: str, algorithm: str, chunk_size: int = CHUNK_SIZE) -> Iterator[ChecksumRecord]:
	"""Hash `files` one at a time, in order, yielding one record per file."""
	for f in files:
		yield ChecksumRecord(
			relative_path=relative_posix(f, base_path),
			file_name=os.path.basename(f),
			algorithm=algorithm,
			result=hash_file_result(f, algorithm, chunk_size),
		)


def manifest_path(directory: Path, algorithm: str, now: Optional[datetime] = None) -> Path:
	ts = (now or datetime.now(timezone.utc)).strftime("%Y%m%dT%H%M%S")
	return Path(directory) / f"{ts}_{algorithm}_{uuid.uuid4()}.csv"


def write_manifest(path: Path, records: Iterable[ChecksumRecord], timestamped_errors: bool = True) -> int:
	path = Path(path)
	count = 0
	# surrogateescape keeps undecodable file name bytes intact
	with path.open("w", encoding="utf-8", errors="surrogateescape", newline="\n") as f:
		f.write(",".join(csv_escape(h) for h in HEADER) + "\n")
		for record in records:
			f.write(",".join(csv_escape(v) for v in record.fields(timestamped_errors)) + "\n")
			count += 1
	return count


def read_manifest(path: Path) -> List[Sequence[str]]:
	"""Parse a manifest back into rows of text fields, header excluded."""
	with Path(path).open("r", encoding="utf-8", errors="surrogateescape", newline="") as f:
		reader = csv.reader(f)
		header = next(reader, None)
		if header is None:
			return []
		if tuple(header) != HEADER:
			raise ValueError(f"Unexpected manifest header: {header}")
		return [tuple(r) for r in reader]
