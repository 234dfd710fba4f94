from __future__ import annotations

import http.client
import urllib.error
import urllib.request

from .models import RunFailure, RunOutcome, RunResult, parse_method

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "reqdeck/0.1"


class RequestRunner:
    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def run(self, method: str, url: str, body: str) -> RunOutcome:
        verb = parse_method(method)
        if verb is None:
            return RunFailure(f"invalid HTTP method: {method!r}")
        if not url.strip():
            return RunFailure("no URL given")
        data = body.encode("utf-8") if body else None
        try:
            req = urllib.request.Request(url.strip(), data=data, method=verb)
        except ValueError as exc:
            return RunFailure(str(exc))
        req.add_header("User-Agent", USER_AGENT)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return RunResult(status=str(resp.status), body=_decode(resp.read(), resp.headers.get_content_charset()))
        except urllib.error.HTTPError as exc:
            # 4xx/5xx still carry a response worth showing.
            payload = exc.read() if exc.fp is not None else b""
            charset = exc.headers.get_content_charset() if exc.headers is not None else None
            return RunResult(status=str(exc.code), body=_decode(payload, charset))
        except urllib.error.URLError as exc:
            return RunFailure(f"request failed: {exc.reason}")
        except (OSError, ValueError, http.client.HTTPException) as exc:
            return RunFailure(f"request failed: {exc}")


def _decode(payload: bytes, charset: str | None) -> str:
    try:
        return payload.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return payload.decode("utf-8", errors="replace")
