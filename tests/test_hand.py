"""
Tests for the hand tracker thread, its snapshots and model download.
"""

import threading
import time
import urllib.request
from types import SimpleNamespace

import numpy as np
import pytest

from fingerpaint.app import FingerPaintApp
from fingerpaint.config import AppConfig, HandConfig
from fingerpaint.core.hand import HandTracker, ensure_model
from fingerpaint.core.lifecycle import LifecycleController, LifecycleState
from fingerpaint.core.snapshot import PinchState


FAKE_MP = SimpleNamespace(
    Image=lambda image_format, data: data,
    ImageFormat=SimpleNamespace(SRGB="srgb"),
)


def wait_for(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.005)
    return condition()


class FakeFrames:
    """Frame source handing out a new frame id on every pull."""

    def __init__(self):
        self.frame_id = 0
        self.frame = np.zeros((48, 64, 3), dtype=np.uint8)

    def latest(self):
        self.frame_id += 1
        return self.frame_id, self.frame


def pinching_hand():
    points = [SimpleNamespace(x=0.5, y=0.9) for _ in range(21)]
    points[4] = SimpleNamespace(x=0.2, y=0.5)
    points[8] = SimpleNamespace(x=0.21, y=0.51)
    for tip, x in ((12, 0.6), (16, 0.7), (20, 0.8)):
        points[tip] = SimpleNamespace(x=x, y=0.2)
    return points


class FakeLandmarker:
    def __init__(self, error=None):
        self.error = error
        self.calls = 0
        self.closed = False

    def detect_for_video(self, image, timestamp_ms):
        self.calls += 1
        time.sleep(0.001)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            hand_landmarks=[pinching_hand()],
            handedness=[[SimpleNamespace(category_name="Right")]],
        )

    def close(self):
        self.closed = True


@pytest.fixture
def model_file(tmp_path):
    path = tmp_path / "hand_landmarker.task"
    path.write_bytes(b"model")
    return str(path)


def make_tracker(model_path, landmarker):
    tracker = HandTracker(FakeFrames(), model_path=model_path)
    tracker._create_landmarker = lambda: (FAKE_MP, landmarker)
    return tracker


def test_snapshot_published_after_first_frame(model_file):
    landmarker = FakeLandmarker()
    tracker = make_tracker(model_file, landmarker)

    assert tracker.get_snapshot() is None
    tracker.start_tracking()
    try:
        assert tracker.is_running()
        assert wait_for(tracker.is_ready)
        snapshot = tracker.get_snapshot()
        assert set(snapshot.landmarks) == {0}
        assert snapshot.finger_state(0, 0) in (PinchState.START, PinchState.HELD)
        assert wait_for(lambda: tracker.get_snapshot().finger_state(0, 0) is PinchState.HELD)
    finally:
        tracker.stop_tracking()

    assert not tracker.is_running()
    assert not tracker.is_ready()
    assert tracker.get_snapshot() is None
    assert wait_for(lambda: landmarker.closed)


def test_detection_error_ends_run(model_file):
    tracker = make_tracker(model_file, FakeLandmarker(error=RuntimeError("boom")))
    lifecycle = LifecycleController(tracker)

    lifecycle.start()

    assert wait_for(lambda: not tracker.is_running())
    assert lifecycle.poll() is LifecycleState.STOPPED
    assert tracker.get_snapshot() is None


def test_restart_while_loading_runs_a_single_loop(model_file):
    stale = FakeLandmarker()
    fresh = FakeLandmarker()
    gate = threading.Event()
    created = []

    def create():
        created.append(len(created))
        if len(created) == 1:
            # First run is still loading the model when it gets stopped
            gate.wait(2.0)
            return FAKE_MP, stale
        return FAKE_MP, fresh

    tracker = HandTracker(FakeFrames(), model_path=model_file)
    tracker.JOIN_TIMEOUT = 0.05
    tracker._create_landmarker = create

    tracker.start_tracking()
    assert wait_for(lambda: created)
    tracker.stop_tracking()
    tracker.start_tracking()
    try:
        assert wait_for(lambda: fresh.calls > 0)
        gate.set()
        assert wait_for(lambda: stale.closed)

        assert stale.calls == 0
        assert tracker.is_running()
        assert wait_for(tracker.is_ready)
    finally:
        tracker.stop_tracking()


def fail_download(url, filename):
    with open(filename, "wb") as f:
        f.write(b"trunc")
    raise OSError("connection reset")


def test_download_failure_ends_run_without_raising(tmp_path, monkeypatch):
    monkeypatch.setattr(urllib.request, "urlretrieve", fail_download)
    model_path = tmp_path / "models" / "hand_landmarker.task"
    tracker = HandTracker(FakeFrames(), model_path=str(model_path), model_url="http://example.invalid/m")

    tracker.start_tracking()

    assert wait_for(lambda: not tracker.is_running())
    assert not model_path.exists()
    assert not (tmp_path / "models" / "hand_landmarker.task.part").exists()


def test_app_start_key_survives_download_failure(tmp_path, monkeypatch):
    monkeypatch.setattr(urllib.request, "urlretrieve", fail_download)
    config = AppConfig(hand=HandConfig(model_path=str(tmp_path / "hand.task"),
                                       model_url="http://127.0.0.1:9/none"))
    app = FingerPaintApp(config)

    assert app.handle_key(ord('s'))
    assert app.lifecycle.state is LifecycleState.LOADING
    assert wait_for(lambda: app.lifecycle.poll() is LifecycleState.STOPPED)


def test_ensure_model_moves_complete_download_into_place(tmp_path, monkeypatch):
    def download(url, filename):
        with open(filename, "wb") as f:
            f.write(b"complete model")

    monkeypatch.setattr(urllib.request, "urlretrieve", download)
    model_path = tmp_path / "models" / "hand_landmarker.task"

    assert ensure_model(str(model_path), "http://example.invalid/m") == str(model_path)
    assert model_path.read_bytes() == b"complete model"
    assert not (tmp_path / "models" / "hand_landmarker.task.part").exists()


def test_ensure_model_keeps_existing_file(model_file, monkeypatch):
    def download(url, filename):
        raise AssertionError("should not download")

    monkeypatch.setattr(urllib.request, "urlretrieve", download)

    assert ensure_model(model_file, "http://example.invalid/m") == model_file


def test_ensure_model_failure_raises_runtime_error(tmp_path, monkeypatch):
    monkeypatch.setattr(urllib.request, "urlretrieve", fail_download)

    with pytest.raises(RuntimeError):
        ensure_model(str(tmp_path / "hand.task"), "http://example.invalid/m")
    assert list(tmp_path.iterdir()) == []
