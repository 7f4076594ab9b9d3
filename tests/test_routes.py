from fastapi.testclient import TestClient

from builders import frame_json, squat_frames
from musclelab.main import app

client = TestClient(app)


def payload(target_area="lower", motion_type="ISOTONIC"):
    return {
        "target_area": target_area,
        "motion_type": motion_type,
        "frames": [
            {"timestamp_ms": i * 33, "landmarks": frame_json(f)}
            for i, f in enumerate(squat_frames(24, period=12))
        ],
    }


def test_health():
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_analyze_returns_report():
    res = client.post("/analyze", json=payload())
    assert res.status_code == 200
    body = res.json()
    for key in ("biomech_pattern", "detailed_muscle_usage", "rom_data", "stability_warning"):
        assert key in body
    assert body["frames_analyzed"] == 24


def test_analyze_rejects_unknown_area():
    res = client.post("/analyze", json=payload(target_area="SIDEWAYS"))
    assert res.status_code == 422
