"""Social bookmarking services."""

from __future__ import annotations

import httpx

from claimcheck.services.base import HttpRequest


class StumbleUponStrategy:
    title = "StumbleUpon"

    def build_request(self, name: str) -> HttpRequest:
        return HttpRequest(
            method="POST",
            url="https://www.stumbleupon.com/api/v2_0/signup/validateusername",
            data={"username": name},
        )

    def accepted_status_codes(self) -> frozenset[int]:
        return frozenset({200, 500})

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        # The validator answers 500 for names that are already registered
        return response.status_code == 200
