"""Email providers."""

from __future__ import annotations

import json

import httpx

from claimcheck.services.base import HttpRequest


class GmailStrategy:
    title = "Gmail"

    def build_request(self, name: str) -> HttpRequest:
        payload = {
            "input01": {
                "Input": "GmailAddress",
                "GmailAddress": name,
                "FirstName": "",
                "LastName": "",
            },
            "Locale": "en",
        }
        return HttpRequest(
            method="POST",
            url="https://accounts.google.com/InputValidator?resource=SignUp",
            headers={"content-type": "application/json"},
            content=json.dumps(payload),
        )

    def accepted_status_codes(self) -> frozenset[int]:
        return frozenset({200})

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        return response.json()["input01"]["Valid"] == "true"
