"""Personal profile pages."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from claimcheck.services.base import HttpRequest

NOT_FOUND_MARKER = "<p>Not Found: That ID is not in our database.</p>"


class ScrimStrategy:
    title = "scr.im"

    def build_request(self, name: str) -> HttpRequest:
        return HttpRequest(method="GET", url=f"http://scr.im/{quote(name, safe='')}")

    def accepted_status_codes(self) -> frozenset[int]:
        return frozenset({200})

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        return NOT_FOUND_MARKER in response.text
