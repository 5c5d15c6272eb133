from __future__ import annotations
import base64
import hashlib
import json
import os
import platform
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from .comparator import ComparisonResult
from .errors import AuditError, HashWalkError

GENESIS = "0" * 64
LOG_NAME = "scans.jsonl"
HEAD_NAME = "scans.head"
KEY_NAME = "signing_ed25519.pem"
PUBLIC_KEY_NAME = "signing_ed25519.pub.pem"


def _canonical(entry: Dict[str, Any]) -> bytes:
	return json.dumps(entry, ensure_ascii=False, sort_keys=True, separators=(",", ":")).encode("utf-8")


def _link(previous: str, body: Dict[str, Any]) -> str:
	return hashlib.sha256(previous.encode("ascii") + _canonical(body)).hexdigest()


def _private_dir(path: Path) -> None:
	path.mkdir(parents=True, exist_ok=True, mode=0o700)
	if hasattr(os, "getuid"):
		if path.stat().st_uid != os.getuid():
			raise AuditError(f"Audit directory {path} is owned by another user")
		os.chmod(path, 0o700)


def _write_private(path: Path, data: bytes) -> None:
	# O_EXCL: never follow or reuse a file someone else placed there
	fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
	with os.fdopen(fd, "wb") as f:
		f.write(data)


def load_signing_key(audit_dir: Path) -> Ed25519PrivateKey:
	"""Ed25519 key for `audit_dir`, generated (owner-only) on first use."""
	key_file = Path(audit_dir) / KEY_NAME
	if key_file.exists():
		try:
			key = serialization.load_pem_private_key(key_file.read_bytes(), password=None)
		except (ValueError, TypeError, UnsupportedAlgorithm) as e:
			raise AuditError(f"Unreadable audit signing key {key_file}: {e}") from e
		if not isinstance(key, Ed25519PrivateKey):
			raise AuditError(f"Audit signing key {key_file} is not an Ed25519 key")
		return key
	key = Ed25519PrivateKey.generate()
	_write_private(key_file, key.private_bytes(
		encoding=serialization.Encoding.PEM,
		format=serialization.PrivateFormat.PKCS8,
		encryption_algorithm=serialization.NoEncryption(),
	))
	(Path(audit_dir) / PUBLIC_KEY_NAME).write_bytes(key.public_key().public_bytes(
		encoding=serialization.Encoding.PEM,
		format=serialization.PublicFormat.SubjectPublicKeyInfo,
	))
	return key


class AuditTrail:
	"""Signed log of scan runs.

	One JSON line per event. Every entry has a sequence number, the id of the
	run it belongs to, `link` (SHA-256 over the previous link and the entry
	body) and `sig` (Ed25519 over body and link). scans.head stores the last
	sequence number and link, so a truncated log fails verification.
	"""

	def __init__(self, audit_dir: Path) -> None:
		self.audit_dir = Path(audit_dir)
		self.log_file = self.audit_dir / LOG_NAME
		self.head_file = self.audit_dir / HEAD_NAME
		try:
			_private_dir(self.audit_dir)
			self._key = load_signing_key(self.audit_dir)
			self._seq, self._head = self._read_head()
		except (OSError, ValueError) as e:
			raise AuditError(f"Unable to open audit trail {self.audit_dir}: {e}") from e

	def _read_head(self) -> Tuple[int, str]:
		if not self.head_file.exists():
			return 0, GENESIS
		parts = self.head_file.read_text(encoding="utf-8").split()
		if len(parts) != 2 or not parts[0].isdigit():
			raise AuditError(f"Corrupt audit head {self.head_file}")
		return int(parts[0]), parts[1]

	def append(self, event: str, run: str, **fields: Any) -> Dict[str, Any]:
		body: Dict[str, Any] = {
			"seq": self._seq + 1,
			"ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
			"event": event,
			"run": run,
		}
		body.update(fields)
		entry = dict(body, link=_link(self._head, body))
		entry["sig"] = base64.b64encode(self._key.sign(_canonical(entry))).decode("ascii")
		try:
			with self.log_file.open("a", encoding="utf-8") as f:
				f.write(json.dumps(entry, ensure_ascii=False) + "\n")
			self.head_file.write_text(f"{entry['seq']} {entry['link']}\n", encoding="utf-8")
		except OSError as e:
			raise AuditError(f"Unable to append to audit trail {self.log_file}: {e}") from e
		self._seq, self._head = entry["seq"], entry["link"]
		return entry

	def scan_started(self, root: str, algorithm: str, compare: Optional[str]) -> str:
		run = uuid.uuid4().hex
		self.append("scan_start", run, root=root, algorithm=algorithm, compare=compare, os=platform.system())
		return run

	def scan_completed(self, run: str, result: ComparisonResult, rows: int) -> None:
		self.append("scan_complete", run, csv=str(result.csv), hash=result.hash, rows=rows, isMatch=result.is_match)

	def scan_failed(self, run: str, err: HashWalkError) -> None:
		self.append("scan_failed", run, kind=err.kind, stage=err.stage, message=err.message)

	def entries(self) -> List[Dict[str, Any]]:
		if not self.log_file.exists():
			return []
		with self.log_file.open("r", encoding="utf-8") as f:
			return [json.loads(line) for line in f if line.strip()]

	def verify_entry(self, entry: Dict[str, Any]) -> bool:
		sig = entry.get("sig")
		if not sig:
			return False
		signed = {k: v for k, v in entry.items() if k != "sig"}
		try:
			self._key.public_key().verify(base64.b64decode(sig), _canonical(signed))
		except (InvalidSignature, ValueError):
			return False
		return True

	def verify(self) -> bool:
		"""Replay the whole log: sequence, links, signatures and head."""
		seq, link = 0, GENESIS
		for entry in self.entries():
			seq += 1
			body = {k: v for k, v in entry.items() if k not in ("link", "sig")}
			link = _link(link, body)
			if entry.get("seq") != seq or entry.get("link") != link or not self.verify_entry(entry):
				return False
		return (seq, link) == (self._seq, self._head)
