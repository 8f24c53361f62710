"""Developer tools and code hosting."""

from __future__ import annotations

import json
from urllib.parse import quote

import httpx

from claimcheck.services.base import (
    DEFAULT_ACCEPTED_STATUS_CODES,
    HttpRequest,
    available_if_not_found,
)


class Cloud9Strategy:
    title = "Cloud9"

    def build_request(self, name: str) -> HttpRequest:
        return HttpRequest(
            method="POST",
            url="https://c9.io/auth/login",
            headers={
                "accept": "*/*",
                "content-type": "application/json",
                "origin": "https://c9.io",
            },
            content=json.dumps({"username": name, "password": " "}),
        )

    def accepted_status_codes(self) -> frozenset[int]:
        return frozenset({200, 403})

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        return response.status_code == 403 and response.text == "Incorrect username."


class GitHubStrategy:
    title = "GitHub"

    def build_request(self, name: str) -> HttpRequest:
        return HttpRequest(url=f"https://github.com/{quote(name, safe='')}")

    def accepted_status_codes(self) -> frozenset[int]:
        return DEFAULT_ACCEPTED_STATUS_CODES

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        return available_if_not_found(response)


class PastebinStrategy:
    title = "Pastebin"

    def build_request(self, name: str) -> HttpRequest:
        return HttpRequest(
            url=f"https://pastebin.com/u/{quote(name, safe='')}",
            follow_redirects=False,
        )

    def accepted_status_codes(self) -> frozenset[int]:
        return frozenset({200, 302})

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        return response.status_code == 302
