"""Shared fixtures for package-analyzer tests."""

from __future__ import annotations

import json
from typing import Any

import pytest


@pytest.fixture
def manifest() -> dict[str, Any]:
    return {
        "name": "demo-app",
        "version": "1.0.0",
        "dependencies": {
            "react": "^18.2.0",
            "lodash": "~4.17.20",
            "@types/node": ">=20.0.0",
        },
        "devDependencies": {
            "jest": "29.7.0",
            "lodash": "4.17.21",
        },
    }


@pytest.fixture
def lockfile() -> dict[str, Any]:
    return {
        "name": "demo-app",
        "version": "1.0.0",
        "lockfileVersion": 2,
        "packages": {
            "": {
                "name": "demo-app",
                "dependencies": {"express": "^4.18.0", "left-pad": "^1.3.0", "ghost": "^1.0.0"},
                "devDependencies": {"jest": "^29.0.0", "missing-dev": "^2.0.0"},
            }
        },
        "dependencies": {
            "express": {
                "version": "4.18.2",
                "dependencies": {
                    "body-parser": {
                        "version": "1.20.1",
                        "dependencies": {"bytes": {"version": "3.1.2"}},
                    },
                    "cookie": {"version": "0.5.0"},
                },
            },
            "jest": {
                "version": "29.7.0",
                "dev": True,
                "dependencies": {"bytes": {"version": "3.1.2"}},
            },
            "left-pad": {"version": "1.3.0"},
            "bytes": {"version": "3.1.2"},
        },
    }


@pytest.fixture
def lockfile_text(lockfile) -> str:
    return json.dumps(lockfile)


@pytest.fixture
def manifest_text(manifest) -> str:
    return json.dumps(manifest)


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None, invalid_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def packument(latest: str, modified: str = "2024-01-05T10:00:00.000Z") -> dict[str, Any]:
    return {
        "name": "pkg",
        "dist-tags": {"latest": latest},
        "time": {"modified": modified, "created": "2015-01-01T00:00:00.000Z"},
        "versions": {latest: {}},
    }
