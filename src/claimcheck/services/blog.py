"""Blogging platforms."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from claimcheck.services.base import AvailabilityOutcome, HttpRequest


class LiveJournalStrategy:
    title = "LiveJournal"

    def build_request(self, name: str) -> HttpRequest:
        return HttpRequest(url=f"http://{quote(name, safe='')}.livejournal.com")

    def accepted_status_codes(self) -> frozenset[int]:
        return frozenset({200, 404, 410})

    def interpret_response(self, name: str, response: httpx.Response) -> AvailabilityOutcome:
        # 410 is a deleted or purged journal; the name can usually be bought back
        if response.status_code == 410:
            return AvailabilityOutcome(True, detail="purchase may be required")
        return AvailabilityOutcome(response.status_code != 200)


class WordPressStrategy:
    title = "WordPress"

    def build_request(self, name: str) -> HttpRequest:
        return HttpRequest(
            url=f"https://{quote(name, safe='')}.wordpress.com",
            follow_redirects=False,
        )

    def accepted_status_codes(self) -> frozenset[int]:
        return frozenset({200, 302, 410})

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        return response.status_code == 302
