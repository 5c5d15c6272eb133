from __future__ import annotations
import errno
import hashlib
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from .diagnostics import debug
from .errors import UnsupportedAlgorithmError

CHUNK_SIZE = 1024 * 1024
ERROR_PREFIX = "ERROR_"

# Algorithms accepted for scanning
SUPPORTED_ALGORITHMS = ("md5", "sha256", "sha384", "sha512")

# Names probed by --verify-supported
PROBE_ALGORITHMS = (
	"md5",
	"md5-sha1",
	"sha1",
	"sha224",
	"sha256",
	"sha384",
	"sha512",
	"sha512_224",
	"sha512_256",
	"sha3_224",
	"sha3_256",
	"sha3_384",
	"sha3_512",
	"shake_128",
	"shake_256",
	"blake2b",
	"blake2s",
	"ripemd160",
	"sm3",
	"whirlpool",
)


@dataclass(frozen=True)
class HashOk:
	digest: str

	def text(self, timestamped: bool = True) -> str:
		return self.digest


@dataclass(frozen=True)
class HashErr:
	code: str
	# epoch millis at the time of failure
	at: int

	def text(self, timestamped: bool = True) -> str:
		if timestamped:
			return f"{ERROR_PREFIX}{self.code}_{self.at}"
		return f"{ERROR_PREFIX}{self.code}"


HashResult = Union[HashOk, HashErr]


def normalize_algorithm(name: str) -> str:
	algo = (name or "").strip().lower()
	if algo not in SUPPORTED_ALGORITHMS:
		raise UnsupportedAlgorithmError(
			f"Invalid algorithm: {algo}. Must be one of: {', '.join(SUPPORTED_ALGORITHMS)}"
		)
	return algo


def is_algo_available(name: str) -> bool:
	try:
		hashlib.new(name).hexdigest()
		return True
	except (ValueError, TypeError):
		# TypeError: variable-length digests (shake) need an explicit length
		return False


def supported_algorithms(candidates: Iterable[str] = PROBE_ALGORITHMS) -> List[str]:
	return [name for name in candidates if is_algo_available(name)]


def error_code(exc: OSError) -> str:
	if exc.errno is None:
		return "UNKNOWN"
	return errno.errorcode.get(exc.errno, "UNKNOWN")


def hash_file(path: Union[str, Path], algorithm: str, chunk_size: int = CHUNK_SIZE) -> str:
	"""Strict mode: stream `path` through `algorithm`, letting OSError propagate."""
	h = hashlib.new(algorithm)
	with open(path, "rb") as f:
		for chunk in iter(lambda: f.read(chunk_size), b""):
			h.update(chunk)
	return h.hexdigest()


def hash_file_result(path: Union[str, Path], algorithm: str, chunk_size: int = CHUNK_SIZE) -> HashResult:
	"""Tolerant mode: a read failure becomes a HashErr instead of an exception."""
	try:
		return HashOk(hash_file(path, algorithm, chunk_size))
	except OSError as e:
		debug(f"Error hashing file {path}: {e}")
		return HashErr(code=error_code(e), at=int(time.time() * 1000))
