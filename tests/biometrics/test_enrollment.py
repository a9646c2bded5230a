from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from lgu_hris.biometrics.helper import FingerprintHelper, parse_helper_output
from lgu_hris.biometrics.model import EnrolledFinger
from lgu_hris.biometrics.progress import EnrollmentProgressStore
from lgu_hris.biometrics.service import EnrollmentService
from lgu_hris.core.enums import EnrollmentStatus
from lgu_hris.core.exceptions import BiometricError, ConflictError, NotFoundError, ValidationError


class FakeClock:
    def __init__(self):
        self.now = datetime(2025, 3, 3, 8, 0)

    def __call__(self):
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


def test_store_purges_only_finished_entries():
    clock = FakeClock()
    store = EnrollmentProgressStore(clock=clock, purge_after_seconds=300)
    running = store.create(user_id=1, finger_id=0, user_name="Ana")
    done = store.create(user_id=2, finger_id=1, user_name="Ben")
    store.update(done.enrollment_id, status=EnrollmentStatus.ERROR, error="reader unplugged")

    clock.advance(299)
    assert store.purge() == 0
    clock.advance(1)
    assert store.purge() == 1

    assert store.get(done.enrollment_id) is None
    assert store.get(running.enrollment_id) is not None
    assert len(store) == 1


def test_store_creates_one_unfinished_enrollment_per_finger():
    clock = FakeClock()
    store = EnrollmentProgressStore(clock=clock)
    first = store.create(user_id=1, finger_id=0, user_name="Ana")

    assert store.create(user_id=1, finger_id=0, user_name="Ana") is None
    assert store.create(user_id=1, finger_id=1, user_name="Ana") is not None

    store.update(first.enrollment_id, status=EnrollmentStatus.COMPLETE)
    assert store.create(user_id=1, finger_id=0, user_name="Ana") is not None


def test_progress_messages():
    store = EnrollmentProgressStore(clock=FakeClock())
    p = store.create(user_id=1, finger_id=0, user_name="Ana")
    assert p.message == "Initializing enrollment..."
    p = store.update(p.enrollment_id, status=EnrollmentStatus.CAPTURING, current_specimen=2)
    assert p.message == "Capturing attempt 2/3..."
    p = store.update(p.enrollment_id, status=EnrollmentStatus.ERROR, error="timeout")
    assert p.message == "Enrollment failed: timeout"


def test_parse_helper_output_skips_banner_lines():
    out = "DigitalPersona SDK 3.0\n{\"success\": true, \"templateBase64\": \"QUJD\"}\n"
    assert parse_helper_output(out)["templateBase64"] == "QUJD"


def test_parse_helper_output_rejects_garbage():
    with pytest.raises(BiometricError):
        parse_helper_output("no json here")
    with pytest.raises(BiometricError):
        parse_helper_output("")


def _runner(payload: dict, returncode: int = 0, stderr: str = ""):
    calls = []

    def run(cmd, capture_output, text, timeout):
        calls.append(cmd)
        return SimpleNamespace(returncode=returncode, stdout=json.dumps(payload), stderr=stderr)

    run.calls = calls
    return run


def test_helper_enroll_parses_result():
    runner = _runner({"success": True, "templateBase64": "QUJD", "detectedFinger": 3, "templateSize": 3})
    helper = FingerprintHelper("enroll.exe", timeout=5, runner=runner)

    result = helper.enroll(7, 2, "Ana Santos")

    assert runner.calls == [["enroll.exe", "enroll", "7", "2", "Ana Santos"]]
    assert result.template_base64 == "QUJD"
    assert result.finger_id == 3
    assert result.template_size == 3


def test_helper_enroll_reports_failures():
    with pytest.raises(BiometricError, match="Reader not connected"):
        FingerprintHelper("x", runner=_runner({"success": False, "message": "Reader not connected"})).enroll(1, 0, "")
    with pytest.raises(BiometricError, match="device busy"):
        FingerprintHelper("x", runner=_runner({}, returncode=2, stderr="device busy")).enroll(1, 0, "")
    with pytest.raises(BiometricError):
        FingerprintHelper("x", runner=_runner({"success": True})).enroll(1, 0, "")


@dataclass
class InMemoryTemplates:
    saved: dict[tuple, dict] = field(default_factory=dict)

    def has_template(self, *, user_id: int, finger_id: int) -> bool:
        return (user_id, finger_id) in self.saved

    def list_enrolled(self, user_id: int):
        return [
            EnrolledFinger(row["fuid"], finger, row["name"], len(row["template"]), None, None)
            for (uid, finger), row in sorted(self.saved.items())
            if uid == user_id
        ]

    def save_template(self, *, fuid: str, user_id: int, finger_id: int, name: str, template: bytes) -> None:
        self.saved[(user_id, finger_id)] = {"fuid": fuid, "name": name, "template": template}

    def delete(self, *, user_id: int, finger_id: int) -> int:
        return 1 if self.saved.pop((user_id, finger_id), None) else 0


class FakeHelper:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    @property
    def executable(self) -> str:
        return "enroll.exe"

    def is_available(self) -> bool:
        return True

    def enroll(self, user_id, finger_id, user_name):
        if self.error:
            raise self.error
        return self.result


def _service(helper, templates=None):
    templates = templates if templates is not None else InMemoryTemplates()
    store = EnrollmentProgressStore(clock=FakeClock())
    return EnrollmentService(templates, helper, store, spawn=lambda fn: fn()), templates


def test_enroll_capture_then_save():
    from lgu_hris.biometrics.model import CaptureResult

    service, templates = _service(FakeHelper(CaptureResult("QUJD", finger_id=4, template_size=3)))

    started = service.start(user_id=7, finger_id=2, user_name="Ana")
    captured = service.progress(started.enrollment_id)

    assert captured.status is EnrollmentStatus.CAPTURED
    assert captured.finger_id == 4
    assert captured.requested_finger_id == 2
    assert captured.average_quality == 95.0

    fuid = service.save(enrollment_id=started.enrollment_id)

    assert templates.saved[(7, 4)] == {"fuid": fuid, "name": "Ana", "template": b"ABC"}
    done = service.progress(started.enrollment_id)
    assert done.status is EnrollmentStatus.COMPLETE
    assert done.template_base64 is None
    assert service.enrollment_status(7)["total_enrolled"] == 1


def test_helper_failure_marks_enrollment_as_error():
    service, _ = _service(FakeHelper(error=BiometricError("Reader not connected")))

    started = service.start(user_id=7, finger_id=2, user_name="Ana")
    progress = service.progress(started.enrollment_id)

    assert progress.status is EnrollmentStatus.ERROR
    assert progress.error == "Reader not connected"
    with pytest.raises(ValidationError, match="not ready"):
        service.save(enrollment_id=started.enrollment_id)


def test_start_rejects_enrolled_finger_and_bad_ids():
    templates = InMemoryTemplates()
    templates.save_template(fuid="f", user_id=7, finger_id=2, name="Ana", template=b"x")
    service, _ = _service(FakeHelper(), templates)

    with pytest.raises(ConflictError):
        service.start(user_id=7, finger_id=2, user_name="Ana")
    with pytest.raises(ValidationError):
        service.start(user_id=7, finger_id=10, user_name="Ana")
    assert service.check_finger(7, 2)["available"] is False
    assert service.check_finger(7, "3")["available"] is True


def test_second_start_while_capturing_is_rejected():
    pending = []
    service = EnrollmentService(
        InMemoryTemplates(), FakeHelper(), EnrollmentProgressStore(clock=FakeClock()), spawn=pending.append
    )

    service.start(user_id=7, finger_id=2, user_name="Ana")
    with pytest.raises(ConflictError, match="already in progress"):
        service.start(user_id=7, finger_id=2, user_name="Ana")
    assert len(pending) == 1


def test_save_posted_template_without_enrollment():
    service, templates = _service(FakeHelper())
    service.save(user_id=9, finger_id=0, name="Ben", template_base64="QUJD")
    assert templates.saved[(9, 0)]["template"] == b"ABC"

    with pytest.raises(ValidationError, match="base64"):
        service.save(user_id=9, finger_id=1, template_base64="***")


def test_delete_finger_and_unknown_progress():
    templates = InMemoryTemplates()
    templates.save_template(fuid="f", user_id=7, finger_id=2, name="Ana", template=b"x")
    service, _ = _service(FakeHelper(), templates)

    service.delete_finger(user_id=7, finger_id=2)
    with pytest.raises(NotFoundError):
        service.delete_finger(user_id=7, finger_id=2)
    with pytest.raises(NotFoundError):
        service.progress("missing")
