from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Optional


class ManifestDirectory:
	"""Output directory for manifests, defaulting to <tmp>/hashwalk.

	The default lives in the shared temp directory, so it is created owner-only.
	"""

	def __init__(self, base: Optional[Path] = None) -> None:
		if base:
			self.base = Path(base).resolve()
			self.base.mkdir(parents=True, exist_ok=True)
		else:
			self.base = Path(tempfile.gettempdir()) / "hashwalk"
			self.base.mkdir(parents=True, exist_ok=True, mode=0o700)

	@property
	def audit_dir(self) -> Path:
		return self.base / "audit"
