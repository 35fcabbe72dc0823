"""Tests for `python -m news_reader` and `python -m news_reader.proxy` entrypoints."""

from __future__ import annotations

import runpy
from unittest.mock import patch

import pytest

from news_reader.proxy.__main__ import main as proxy_main


def test_main_module_calls_sys_exit_with_main_return_value():
    with (
        patch("news_reader.cli.main", return_value=7) as main_mock,
        patch("sys.exit", side_effect=SystemExit) as exit_mock,
        pytest.raises(SystemExit),
    ):
        runpy.run_module("news_reader.__main__", run_name="__main__")

    main_mock.assert_called_once_with()
    exit_mock.assert_called_once_with(7)


def test_proxy_main_runs_uvicorn_with_settings(monkeypatch):
    monkeypatch.setenv("THENEWSAPI_TOKEN", "t")
    with patch("news_reader.proxy.__main__.uvicorn.run") as run_mock:
        proxy_main(["--host", "0.0.0.0", "--port", "8081", "--log-level", "debug"])

    run_mock.assert_called_once()
    _, kwargs = run_mock.call_args
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 8081
    assert kwargs["log_level"] == "debug"
