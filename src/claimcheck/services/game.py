"""Gaming networks."""

from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import quote

import httpx

from claimcheck.services.base import HttpRequest

FIXTURES_ENV = "CLAIMCHECK_FIXTURES_DIR"
DEFAULT_FIXTURES_DIR = Path(__file__).parent / "fixtures"


def fixtures_dir() -> Path:
    override = os.environ.get(FIXTURES_ENV)
    return Path(override) if override else DEFAULT_FIXTURES_DIR


class XboxStrategy:
    """Xbox Live serves a placeholder avatar for gamertags that do not exist.

    The placeholder is compared byte for byte against a reference image kept
    under the fixtures directory (``game/xbox-bad-avatar.png``).
    """

    title = "Xbox"

    def __init__(self, reference_image: Path | None = None) -> None:
        self._reference_image = reference_image
        self._reference_bytes: bytes | None = None

    @property
    def reference_image(self) -> Path:
        return self._reference_image or fixtures_dir() / "game" / "xbox-bad-avatar.png"

    def _load_reference(self) -> bytes:
        if self._reference_bytes is None:
            path = self.reference_image
            if not path.is_file():
                raise FileNotFoundError(
                    f"Xbox reference image not found at {path}. Set {FIXTURES_ENV} to a "
                    "directory containing game/xbox-bad-avatar.png, or skip it with -c :game"
                )
            self._reference_bytes = path.read_bytes()
        return self._reference_bytes

    def build_request(self, name: str) -> HttpRequest:
        return HttpRequest(
            method="GET",
            url=f"https://avatar-ssl.xboxlive.com/avatar/{quote(name, safe='')}/avatarpic-s.png",
            headers={"accept": "image/png;q=0.9,*/*;q=0.8"},
        )

    def accepted_status_codes(self) -> frozenset[int]:
        return frozenset({200, 500})

    def interpret_response(self, name: str, response: httpx.Response) -> bool:
        if response.status_code == 500:
            return True
        return response.content == self._load_reference()
