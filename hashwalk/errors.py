from __future__ import annotations
import traceback
from typing import Any, Dict, Optional


class HashWalkError(Exception):
	"""Fatal condition that aborts a run.

	`kind` names the failure class, `stage` is filled in by the pipeline with
	the state the run was in when the error surfaced.
	"""

	kind = "HashWalkError"

	def __init__(self, message: str, stage: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		self.stage = stage

	def to_dict(self, debug: bool = False) -> Dict[str, Any]:
		if not debug:
			return {"error": self.message}
		stack = "".join(traceback.format_exception(type(self), self, self.__traceback__))
		return {"error": f"{self.message}\n{stack}"}


class InvalidRootError(HashWalkError):
	kind = "InvalidRoot"


class TraversalError(HashWalkError):
	kind = "TraversalFailure"


class UnsupportedAlgorithmError(HashWalkError):
	kind = "UnsupportedAlgorithm"


class ManifestHashError(HashWalkError):
	kind = "ManifestHashFailure"


class ComparisonTargetHashError(HashWalkError):
	kind = "ComparisonTargetHashFailure"


class ConfigError(HashWalkError):
	kind = "InvalidConfig"


class ManifestWriteError(HashWalkError):
	kind = "ManifestWriteFailure"


class AuditError(HashWalkError):
	kind = "AuditFailure"
