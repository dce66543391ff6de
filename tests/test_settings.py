"""Tests for configuration helpers."""

from config.settings import Config
from src.api.flask_server import SchedulerAPI
from src.scheduler.working_hours import WorkingHoursCalculator


class TestWorkingHoursLabel:
    """One label builder for every place working hours are shown."""

    def test_defaults(self):
        assert Config.working_hours_label() == "08:00-18:00"

    def test_custom_hours_and_separator(self):
        assert Config.working_hours_label(9, 17, separator=" - ") == "09:00 - 17:00"

    def test_calculator_delegates(self):
        calculator = WorkingHoursCalculator(start_hour=7, end_hour=15)

        assert calculator.local_hours_label == Config.working_hours_label(7, 15)
        assert calculator.hours_label(" - ") == "07:00 - 15:00"


class TestApiConfig:
    """Host, port and slow-request settings for the server."""

    def test_get_api_config(self, monkeypatch):
        monkeypatch.setattr(Config, "API_HOST", "127.0.0.1")
        monkeypatch.setattr(Config, "API_PORT", 5055)

        assert Config.get_api_config() == {
            "host": "127.0.0.1",
            "port": 5055,
            "slow_request_seconds": Config.API_SLOW_REQUEST_SECONDS,
        }

    def test_server_runs_on_configured_address(self, store, monkeypatch):
        monkeypatch.setattr(Config, "API_HOST", "127.0.0.1")
        monkeypatch.setattr(Config, "API_PORT", 5055)
        api = SchedulerAPI(store, install_signal_handlers=False)

        calls = []
        monkeypatch.setattr(api.app, "run", lambda **kwargs: calls.append(kwargs))
        api.run()

        assert calls[0]["host"] == "127.0.0.1"
        assert calls[0]["port"] == 5055

    def test_explicit_address_wins(self, store, monkeypatch):
        api = SchedulerAPI(store, install_signal_handlers=False)

        calls = []
        monkeypatch.setattr(api.app, "run", lambda **kwargs: calls.append(kwargs))
        api.run(host="localhost", port=6000)

        assert (calls[0]["host"], calls[0]["port"]) == ("localhost", 6000)
