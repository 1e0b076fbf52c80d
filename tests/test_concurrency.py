import asyncio
import threading
import time

import httpx

from surfsensei import main
from surfsensei.feedback import FeedbackStore
from surfsensei.models import FeedbackRecord

DELAY = 1.0

FORM = {"spots": "Trestles vs Lowers", "swellHeight": "3", "skillLevel": "Advanced"}
GOOD_ANSWER = (
    "**Spot Recommendation:** Lowers\n"
    "**Board Recommendation:** Shortboard\n"
    "**Spot Comparison:** Uppers is fat on this tide.\n"
    "**Session Strategy:** Go early."
)


class SlowGemini:
    def generate(self, system_instruction, user_query):
        time.sleep(DELAY)
        return GOOD_ANSWER

    def generate_with_search(self, prompt):
        time.sleep(DELAY)
        return '{"swellHeight": "4", "tideDirection": "rising"}'


def test_recommendation_and_autofill_run_side_by_side(store, monkeypatch):
    monkeypatch.setattr(main, "get_client", lambda: SlowGemini())

    async def run():
        transport = httpx.ASGITransport(app=main.app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            started = time.perf_counter()
            responses = await asyncio.gather(
                client.post("/recommend", data=FORM),
                client.post("/autofill", data=FORM),
                client.get("/healthz"),
            )
            return time.perf_counter() - started, responses

    elapsed, responses = asyncio.run(run())
    assert [r.status_code for r in responses] == [200, 200, 200]
    assert "<h3>Session Strategy</h3>" in responses[0].text
    assert 'id="swellHeight" value="4"' in responses[1].text
    assert elapsed < DELAY * 1.8


def test_concurrent_appends_keep_every_record(tmp_path):
    path = tmp_path / "feedback.json"

    def submit(n):
        FeedbackStore(path).append(FeedbackRecord(timestamp=str(n), accuracy="inaccurate", comments=f"note {n}"))

    threads = [threading.Thread(target=submit, args=(n,)) for n in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    stored = FeedbackStore(path).all()
    assert sorted(int(r.timestamp) for r in stored) == list(range(20))
