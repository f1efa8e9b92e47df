from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

import httpx
import pytest

from sonarr_api import cli
from sonarr_api.client import SonarrAPI
from sonarr_api.config import ClientConfig

API_KEY = "a1b2c3d4e5f6a7b8c9d0e1f2a3b4c5d6"


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "sonarr.yaml"
    path.write_text(f"hostname: tv.example\napiKey: {API_KEY}\n", encoding="utf-8")
    return path


def _install_transport(monkeypatch: pytest.MonkeyPatch, response: httpx.Response) -> List[httpx.Request]:
    seen: List[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return response

    def _factory(config: ClientConfig) -> SonarrAPI:
        return SonarrAPI(config, transport=httpx.MockTransport(_handler))

    monkeypatch.setattr(cli, "SonarrAPI", _factory)
    return seen


def test_get_prints_json_result(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], config_file: Path
) -> None:
    seen = _install_transport(monkeypatch, httpx.Response(200, json=[{"id": 5}]))

    code = cli.main(["--config", str(config_file), "get", "series", "-p", "id=5"])

    assert code == 0
    assert json.loads(capsys.readouterr().out) == [{"id": 5}]
    assert str(seen[0].url) == "http://tv.example:8989/api/series?id=5"


def test_post_params_are_sent_as_typed_json(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], config_file: Path
) -> None:
    seen = _install_transport(monkeypatch, httpx.Response(201, json={"id": 9}))

    code = cli.main(
        [
            "--config",
            str(config_file),
            "post",
            "command",
            "-p",
            "name=RefreshSeries",
            "-p",
            "seriesId=9",
            "-p",
            "force=true",
        ]
    )

    assert code == 0
    assert json.loads(seen[0].content) == {"name": "RefreshSeries", "seriesId": 9, "force": True}


def test_transport_failure_exits_non_zero(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], config_file: Path
) -> None:
    _install_transport(monkeypatch, httpx.Response(500, json={"message": "boom"}))

    code = cli.main(["--config", str(config_file), "delete", "series/1"])

    assert code == 1
    err = capsys.readouterr().err
    assert "status 500" in err
    assert "boom" in err


def test_config_error_exits_with_usage_code(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    for name in ("SONARR_HOSTNAME", "SONARR_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "broken.yaml"
    path.write_text("hostname: tv.example\napiKey: NOT-A-KEY\n", encoding="utf-8")

    code = cli.main(["--config", str(path), "get", "series"])

    assert code == 2
    assert "invalid api key" in capsys.readouterr().err


def test_parse_param_rejects_missing_separator() -> None:
    with pytest.raises(SystemExit):
        cli.main(["get", "series", "-p", "novalue"])


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("id=5", ("id", 5)),
        ("title=The Office", ("title", "The Office")),
        ("monitored=false", ("monitored", False)),
        ("filter={\"a\":1}", ("filter", "{\"a\":1}")),
        ("empty=", ("empty", "")),
    ],
)
def test_parse_param_values(raw: str, expected: tuple[str, Any]) -> None:
    assert cli._parse_param(raw) == expected
