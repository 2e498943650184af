from kontrola.rate_limit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_allows_five_then_blocks_until_window_expires():
    clock = FakeClock()
    limiter = RateLimiter(window_seconds=60, clock=clock)

    assert [limiter.check("1.2.3.4", 5) for _ in range(5)] == [True] * 5
    assert limiter.check("1.2.3.4", 5) is False

    clock.now += 59
    assert limiter.check("1.2.3.4", 5) is False

    clock.now += 1
    assert limiter.check("1.2.3.4", 5) is True


def test_window_is_fixed_from_first_request():
    clock = FakeClock()
    limiter = RateLimiter(window_seconds=60, clock=clock)

    limiter.check("a", 2)
    clock.now += 50
    limiter.check("a", 2)
    assert limiter.check("a", 2) is False

    # the window started with the first hit, not the last one
    clock.now += 10
    assert limiter.check("a", 2) is True


def test_keys_are_counted_separately():
    limiter = RateLimiter()
    assert limiter.check("a", 1) is True
    assert limiter.check("a", 1) is False
    assert limiter.check("b", 1) is True


def test_least_recently_used_key_is_evicted():
    limiter = RateLimiter(max_keys=2)
    limiter.check("a", 1)
    limiter.check("b", 1)
    limiter.check("c", 1)

    assert len(limiter) == 2
    assert limiter.check("c", 1) is False
    # "a" was dropped and starts over
    assert limiter.check("a", 1) is True


def test_reset():
    limiter = RateLimiter()
    limiter.check("a", 1)
    limiter.reset("a")
    assert limiter.check("a", 1) is True
    limiter.reset()
    assert len(limiter) == 0


def test_sixth_request_is_rejected_with_429(client):
    statuses = [client.post("/api/analyze-property-pdf", json={}).status_code for _ in range(6)]

    assert statuses[:5] == [400] * 5
    assert statuses[5] == 429


def test_429_body(client):
    for _ in range(5):
        client.post("/api/analyze-property", json={})
    response = client.post("/api/analyze-property", json={})

    assert response.status_code == 429
    assert response.json() == {"success": False, "error": "Překročen limit požadavků. Zkuste to za chvíli."}


def test_forwarded_address_is_the_caller_key(client, limiter):
    headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
    for _ in range(5):
        client.post("/api/analyze-property-pdf", json={}, headers=headers)

    assert client.post("/api/analyze-property-pdf", json={}, headers=headers).status_code == 429
    other = client.post("/api/analyze-property-pdf", json={}, headers={"X-Forwarded-For": "198.51.100.1"})
    assert other.status_code == 400
    assert limiter.check("203.0.113.7") is False
