"""Unit tests for the command-line client (HTTP calls are stubbed)."""

import json
import runpy
from pathlib import Path

import httpx
import pytest

CLI = runpy.run_path(str(Path(__file__).resolve().parents[2] / "scripts" / "cli.py"))

TIMELINE_BODY = {
    "farm_id": "YL",
    "as_of": "2025-05-24",
    "total_inventory": 308,
    "total_gilt_inventory": 0,
    "batches": [
        {
            "batch_id": "2025-G11",
            "farrow_date": "2025-05-24",
            "week_index": 0,
            "stage": "lactation",
            "unit": "unassigned",
            "inventory": 308,
            "gilt_inventory": 0,
            "is_landed": False,
            "is_half_landed": True,
            "is_theoretical": False,
            "is_closed": False,
        }
    ],
}


class FakeHttp:
    """Records calls and answers each with a canned response."""

    def __init__(self, status_code: int = 200, body: object = None):
        self.status_code = status_code
        self.body = {"ok": True} if body is None else body
        self.calls: list[tuple[str, str, dict]] = []

    def __call__(self, method: str):
        def send(url: str, **kwargs) -> httpx.Response:
            self.calls.append((method, url, kwargs))
            return httpx.Response(self.status_code, json=self.body)

        return send


@pytest.fixture
def fake_http(monkeypatch):
    fake = FakeHttp()
    for method in ("get", "put", "post"):
        monkeypatch.setattr(httpx, method, fake(method))
    return fake


def run(argv: list[str]) -> None:
    args = CLI["build_parser"]().parse_args(argv)
    handler = CLI[f"cmd_{args.command}"]
    handler(args, args.base_url)


class TestParser:
    def test_event_arguments(self):
        args = CLI["build_parser"]().parse_args(["death", "2025-G11", "--qty", "2", "--date", "2025-06-14"])
        assert (args.command, args.batch_id, args.qty, args.date) == ("death", "2025-G11", 2, "2025-06-14")

    def test_qty_is_required(self):
        with pytest.raises(SystemExit):
            CLI["build_parser"]().parse_args(["sale", "2025-G05"])

    def test_import_mode_choices(self):
        with pytest.raises(SystemExit):
            CLI["build_parser"]().parse_args(["import", "backup.json", "--mode", "append"])


class TestCommands:
    def test_death_puts_daily_record(self, fake_http):
        run(["death", "2025-G11", "--qty", "2", "--date", "2025-06-14"])

        method, url, kwargs = fake_http.calls[0]
        assert method == "put"
        assert url == "http://localhost:8000/api/daily-records/2025-G11/2025-06-14"
        assert kwargs["json"] == {"pig_death_qty": 2}

    def test_sale_with_weight(self, fake_http):
        run(["sale", "2025-G05", "--qty", "40", "--avg-weight", "118.5", "--date", "2025-06-14"])
        assert fake_http.calls[0][2]["json"] == {"pig_sale_qty": 40, "pig_sale_avg_weight_kg": 118.5}

    def test_override(self, fake_http):
        run(["override", "2025-G09", "nursery", "N3", "--affects-following"])

        method, url, kwargs = fake_http.calls[0]
        assert url.endswith("/api/overrides/2025-G09/nursery")
        assert kwargs["json"] == {"assigned_unit": "N3", "affects_following": True}

    def test_base_sends_only_given_fields(self, fake_http):
        run(["base", "2025-G11", "--farrow-date", "2025-05-24", "--liveborn", "312"])
        assert fake_http.calls[0][2]["json"] == {"farrow_date": "2025-05-24", "liveborn_qty": 312}

    def test_import_posts_file_with_mode(self, fake_http, tmp_path):
        backup = tmp_path / "backup.json"
        backup.write_text(json.dumps({"bases": []}), encoding="utf-8")

        run(["import", str(backup), "--mode", "restore"])

        method, url, kwargs = fake_http.calls[0]
        assert (method, kwargs["params"], kwargs["json"]) == ("post", {"mode": "restore"}, {"bases": []})

    def test_timeline_table(self, fake_http, capsys):
        fake_http.body = TIMELINE_BODY
        run(["timeline", "--as-of", "2025-05-24"])

        out = capsys.readouterr().out
        assert fake_http.calls[0][2]["params"] == {"as_of": "2025-05-24"}
        assert "2025-G11" in out
        assert "Total head: 308" in out

    def test_error_exits_non_zero(self, fake_http, capsys):
        fake_http.status_code = 404
        fake_http.body = {"detail": "Base record 2025-G01 not found"}

        with pytest.raises(SystemExit) as exc_info:
            run(["batch", "2025-G01"])

        assert exc_info.value.code == 1
        assert "Error 404" in capsys.readouterr().err
