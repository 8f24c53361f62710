"""News aggregators."""

from __future__ import annotations

import httpx

from claimcheck.services.base import DEFAULT_ACCEPTED_STATUS_CODES, HttpRequest


class FlipboardStrategy:
    title = "Flipboard"

    def build_request(self, name: str) -> HttpRequest:
        return HttpRequest(
            method="GET",
            url="https://flipboard.com/api/flipboard/checkUsername",
            params={"username": name},
        )

    def accepted_status_codes(self) -> frozenset[int]:
        return DEFAULT_ACCEPTED_STATUS_CODES

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        return bool(response.json()["available"])
