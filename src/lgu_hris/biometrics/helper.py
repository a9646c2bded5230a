"""Bridge to the fingerprint enrollment helper executable.

The helper owns the reader SDK: it opens the enrollment dialog, collects
the specimens and prints one JSON object on stdout. Progress lines go to
stderr.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Callable, Optional

from ..core.exceptions import BiometricError
from .model import CaptureResult

logger = logging.getLogger(__name__)


def parse_helper_output(stdout: str) -> dict:
    """Return the JSON object printed by the helper.

    Some SDK builds print banner lines before the result, so the last line
    that parses as a JSON object wins.
    """

    text = (stdout or "").strip()
    if not text:
        raise BiometricError("Enrollment helper returned no output")
    try:
        data = json.loads(text)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass
    for line in reversed(text.splitlines()):
        line = line.strip()
        if not line.startswith("{"):
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    raise BiometricError("Invalid JSON response from enrollment helper")


class FingerprintHelper:
    def __init__(self, executable: str, *, timeout: int = 120, runner: Optional[Callable] = None):
        self._executable = executable
        self._timeout = timeout
        self._run = runner or subprocess.run

    @property
    def executable(self) -> str:
        return self._executable

    def is_available(self) -> bool:
        return bool(self._executable) and Path(self._executable).is_file()

    def enroll(self, user_id: int, finger_id: int, user_name: str) -> CaptureResult:
        cmd = [self._executable, "enroll", str(user_id), str(finger_id), user_name or ""]
        logger.info("starting enrollment helper for user %s finger %s", user_id, finger_id)
        try:
            proc = self._run(cmd, capture_output=True, text=True, timeout=self._timeout)
        except FileNotFoundError:
            raise BiometricError(f"Enrollment helper not found: {self._executable}")
        except subprocess.TimeoutExpired:
            raise BiometricError("Enrollment timed out waiting for the fingerprint reader")

        for line in (proc.stderr or "").splitlines():
            if line.strip():
                logger.debug("helper: %s", line.strip())

        if proc.returncode != 0:
            raise BiometricError((proc.stderr or "").strip() or "Enrollment process failed")

        result = parse_helper_output(proc.stdout)
        if not result.get("success"):
            raise BiometricError(result.get("message") or "Enrollment failed")
        template = result.get("templateBase64")
        if not template:
            raise BiometricError("Enrollment helper returned no template")

        detected = result.get("detectedFinger", result.get("fingerId"))
        return CaptureResult(
            template_base64=template,
            finger_id=int(detected) if detected is not None else None,
            template_size=int(result.get("templateSize") or 0),
        )
