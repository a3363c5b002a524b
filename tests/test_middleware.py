from datetime import datetime, timedelta
from middleware.rate_limit_middleware import RateLimitMiddleware

async def _app(scope, receive, send):
    pass

class TestRateLimitMiddleware:
    def test_idle_clients_are_forgotten(self):
        middleware = RateLimitMiddleware(_app, max_requests=5, time_window=60)
        now = datetime.now()
        middleware.client_requests["10.0.0.1"].append(now - timedelta(seconds=120))
        middleware.client_requests["10.0.0.2"].extend([now - timedelta(seconds=90), now - timedelta(seconds=5)])

        middleware._prune(now)

        assert list(middleware.client_requests) == ["10.0.0.2"]
        assert len(middleware.client_requests["10.0.0.2"]) == 1
