from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from loguru import logger
from utils.errors import RateLimited

class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_requests: int = 60, time_window: int = 60):
        super().__init__(app)
        self.max_requests = max_requests
        self.time_window = time_window
        self.client_requests: Dict[str, list[datetime]] = defaultdict(list)

    def _prune(self, now: datetime) -> None:
        """Убирает устаревшие отметки и клиентов, у которых их не осталось"""
        window = timedelta(seconds=self.time_window)
        for client_id in list(self.client_requests):
            recent = [req_time for req_time in self.client_requests[client_id] if now - req_time < window]
            if recent:
                self.client_requests[client_id] = recent
            else:
                del self.client_requests[client_id]

    async def dispatch(self, request: Request, call_next):
        client_id = request.client.host if request.client else None

        if client_id and self.max_requests > 0:
            now = datetime.now()
            self._prune(now)
            client_requests = self.client_requests[client_id]

            if len(client_requests) >= self.max_requests:
                logger.warning(f"Rate limit exceeded for client {client_id}")
                error = RateLimited("Too many requests. Please wait a moment and try again.")
                return JSONResponse(error.to_dict(), status_code=error.status_code)

            client_requests.append(now)

        return await call_next(request)
