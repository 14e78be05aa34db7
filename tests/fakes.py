"""
Stand-ins for aiohttp's session and response objects.

`FakeSession` routes each GET through a handler ``(url, params) -> outcome``
where the outcome is a `FakeResp`, a JSON-able payload (served as 200) or an
exception instance (raised when the request is entered, like aiohttp does).
"""
import asyncio


class FakeResp:
    def __init__(self, status=200, payload=None, delay=0.0):
        self.status = status
        self._payload = payload
        self.delay = delay

    async def __aenter__(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _Raising:
    def __init__(self, exc):
        self.exc = exc

    async def __aenter__(self):
        raise self.exc

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    def __init__(self, handler):
        self.handler = handler
        self.calls = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        params = dict(params or {})
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        outcome = self.handler(url, params)
        if isinstance(outcome, BaseException):
            return _Raising(outcome)
        if isinstance(outcome, FakeResp):
            return outcome
        return FakeResp(200, outcome)

    def urls(self):
        return [c["url"] for c in self.calls]


def always(outcome):
    return FakeSession(lambda url, params: outcome)


def sequence(*outcomes):
    """Serve outcomes in call order, one per request."""
    queue = list(outcomes)
    return FakeSession(lambda url, params: queue.pop(0))
