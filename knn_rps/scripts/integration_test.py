"""
Integration test script: hits all endpoints of a running server and verifies responses.

Usage:
    CAMERA_ADAPTER=mock EMBEDDER=histogram python -m knn_rps.scripts.serve   (terminal 1)
    python -m knn_rps.scripts.integration_test                                (terminal 2)
"""

import sys
import time
import httpx

BASE = "http://localhost:8000"
TIMEOUT = 30.0
passed = 0
failed = 0


def test(name: str, method: str, path: str, checks: dict | None = None) -> dict | None:
    global passed, failed
    url = f"{BASE}{path}"
    checks = checks or {}
    try:
        r = httpx.request(method, url, timeout=TIMEOUT)

        if r.status_code != 200:
            print(f"  FAIL  {name}: HTTP {r.status_code}")
            failed += 1
            return None

        data = r.json()
        for key, expected in checks.items():
            actual = data.get(key)
            if actual != expected:
                print(f"  FAIL  {name}: {key}: expected {expected!r}, got {actual!r}")
                failed += 1
                return data

        print(f"  OK    {name}")
        passed += 1
        return data

    except httpx.ConnectError:
        print(f"  FAIL  {name}: connection refused (is the server running?)")
        failed += 1
    except Exception as e:
        print(f"  FAIL  {name}: {type(e).__name__}: {e}")
        failed += 1
    return None


def wait_ready(seconds: float = 60.0):
    deadline = time.time() + seconds
    while time.time() < deadline:
        try:
            if httpx.get(f"{BASE}/health", timeout=TIMEOUT).json().get("capture_running"):
                return
        except httpx.HTTPError:
            pass
        time.sleep(0.5)


def main():
    print(f"\nIntegration tests against {BASE}\n")
    print("--- Health & Status ---")
    wait_ready()
    test("GET /health", "GET", "/health", {"api": True, "capture_running": True})
    test("DELETE /examples", "DELETE", "/examples", {"ok": True})
    test("GET /status", "GET", "/status", {"total_examples": 0})

    print("\n--- Round before training ---")
    test("POST /play_round (no prediction)", "POST", "/play_round",
         {"ok": False, "error_code": "INVALID_STATE", "message": "classify first"})

    print("\n--- Training ---")
    test("POST /train/rock/begin", "POST", "/train/rock/begin", {"ok": True})
    time.sleep(0.5)  # let a few cycles add examples
    test("POST /train/end", "POST", "/train/end", {"ok": True})
    test("POST /train/lizard/begin (unknown)", "POST", "/train/lizard/begin",
         {"ok": False, "error_code": "UNKNOWN_LABEL"})
    time.sleep(0.3)
    status = test("GET /status (trained)", "GET", "/status", {"predicted": "rock"})
    if status:
        print(f"        counts: {[(c['label'], c['count']) for c in status['classes']]}")

    print("\n--- Round ---")
    test("POST /play_round", "POST", "/play_round", {"ok": True})

    print("\n--- Capture ---")
    test("POST /capture/stop", "POST", "/capture/stop", {"ok": True})
    test("POST /capture/start", "POST", "/capture/start", {"ok": True})
    test("DELETE /examples/rock", "DELETE", "/examples/rock", {"ok": True})

    # Summary
    total = passed + failed
    print(f"\n{'='*40}")
    print(f"  {passed}/{total} passed, {failed} failed")
    print(f"{'='*40}\n")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
