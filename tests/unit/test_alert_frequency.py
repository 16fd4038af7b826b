"""
Unit tests for AlertFrequencyReporter.

End-to-end through query building, search, aggregation and formatting with
the HTTP layer mocked.
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from herald.alerts.alert_frequency import AlertFrequencyReporter
from herald.alerts.models import RawEvent, SearchResult, StateCount
from herald.exceptions import ConfigurationError, TransportError
from herald.utils.structured_logging import (
    clear_logging_context,
    get_logging_context,
    set_logging_context,
)


def _response(status_code=200, text="[]"):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.reason = "OK" if status_code == 200 else "Error"
    return response


def _row(state, minute, hour="3", service="Disk Space"):
    return {
        'hostname': 'web0200.ny4',
        'service_name': service,
        'state': state,
        'date_year': '2014',
        'date_month': 'may',
        'date_mday': '17',
        'date_hour': hour,
        'date_minute': minute,
    }


class TestAlertFrequencyReporter:
    """Test the full pipeline."""

    @pytest.fixture
    def reporter(self, splunk_config, timeouts):
        return AlertFrequencyReporter.from_config(splunk_config, timeouts)

    @patch.object(requests.Session, 'post')
    def test_duplicate_down_rows_count_once(self, mock_post, reporter):
        rows = [_row("DOWN", "14", hour="22", service=""), _row("DOWN", "14", hour="22", service="")]
        mock_post.return_value = _response(text=json.dumps(rows))

        report = reporter.get_alert_frequency("web0200.ny4")

        assert report.counts == [StateCount("DOWN", 1)]
        assert report.period == "7 days"
        assert report.service is None
        assert reporter.report("web0200.ny4") == "HOST 'web0200.ny4' has experienced 1 DOWN alerts in the last 7 days."

    @patch.object(requests.Session, 'post')
    def test_service_alert_summary(self, mock_post, reporter):
        rows = [_row("CRITICAL", "1"), _row("CRITICAL", "2"), _row("CRITICAL", "3"), _row("WARNING", "4")]
        mock_post.return_value = _response(text=json.dumps(rows))

        summary = reporter.report("web0200.ny4", "Disk Space")

        assert summary == (
            "HOST 'web0200.ny4' has experienced 3 CRITICAL alerts, 1 WARNING alerts "
            "for SERVICE 'Disk Space' in the last 7 days."
        )

    @patch.object(requests.Session, 'post')
    def test_options_reach_the_request(self, mock_post, reporter):
        mock_post.return_value = _response()

        report = reporter.get_alert_frequency(
            "web0200.ny4", "Disk Space", duration=1, max_results=100, latest_time="-1h"
        )

        form = mock_post.call_args[1]['data']
        assert form['earliest_time'] == "-1d"
        assert form['latest_time'] == "-1h"
        assert form['count'] == 100
        assert 'service_name="Disk Space"' in form['search']
        assert report.period == "1 day"

    @patch.object(requests.Session, 'post')
    def test_zero_duration_is_kept(self, mock_post, reporter):
        mock_post.return_value = _response()

        report = reporter.get_alert_frequency("web01", duration=0)

        assert mock_post.call_args[1]['data']['earliest_time'] == "-0d"
        assert report.period == "0 days"

    @patch.object(requests.Session, 'post')
    def test_confirmed_zero_events_still_reports(self, mock_post, reporter):
        mock_post.return_value = _response(text="[]")

        report = reporter.get_alert_frequency("web01")

        assert report is not None
        assert report.counts == []
        assert reporter.report("web01") == "HOST 'web01' has experienced 0 alerts in the last 7 days."

    @patch.object(requests.Session, 'post')
    def test_backend_rejection_yields_no_data(self, mock_post, reporter):
        mock_post.return_value = _response(status_code=500, text="boom")

        assert reporter.get_alert_frequency("web01") is None
        assert reporter.report("web01") is None

    @patch.object(requests.Session, 'post')
    def test_malformed_response_yields_no_data(self, mock_post, reporter):
        mock_post.return_value = _response(text="not json")

        assert reporter.report("web01", "CPU") is None

    @patch.object(requests.Session, 'post')
    def test_transport_error_absorbed_by_default(self, mock_post, reporter, caplog):
        mock_post.side_effect = requests.exceptions.ConnectTimeout("timed out")

        with caplog.at_level(logging.ERROR):
            assert reporter.report("web01") is None

        assert "unreachable" in caplog.text

    @patch.object(requests.Session, 'post')
    def test_transport_error_raised_when_strict(self, mock_post, splunk_config, timeouts):
        mock_post.side_effect = requests.exceptions.ConnectionError("refused")
        reporter = AlertFrequencyReporter.from_config(splunk_config, timeouts, raise_on_transport_error=True)

        with pytest.raises(TransportError):
            reporter.report("web01")

    @patch.object(requests.Session, 'post')
    def test_corrupt_body_encoding_yields_no_data(self, mock_post, reporter):
        mock_post.side_effect = requests.exceptions.ContentDecodingError("bad gzip from backend")

        assert reporter.report("web01") is None

    def test_logging_context_set_during_search(self):
        seen = {}

        def _search(params):
            seen.update(get_logging_context())
            return SearchResult.success([])

        client = MagicMock()
        client.config.index = "nagios"
        client.search.side_effect = _search

        set_logging_context(alert_id='abc-123')
        try:
            AlertFrequencyReporter(client).get_alert_frequency("web01", "CPU")
            assert seen == {'alert_id': 'abc-123', 'hostname': 'web01', 'service': 'CPU'}
            assert get_logging_context() == {'alert_id': 'abc-123'}
        finally:
            clear_logging_context()

    def test_logging_context_restored_after_transport_error(self):
        client = MagicMock()
        client.config.index = "nagios"
        client.search.side_effect = TransportError('splunk.example.com', 'timed out')

        assert AlertFrequencyReporter(client).get_alert_frequency("web01") is None
        assert get_logging_context() == {}

    def test_empty_hostname_rejected(self, reporter):
        with pytest.raises(ValueError):
            reporter.get_alert_frequency("")

    def test_uses_configured_index(self, timeouts):
        client = MagicMock()
        client.config.index = "nagios_archive"
        client.search.return_value = SearchResult.success([RawEvent(hostname="web01", state="DOWN")])

        report = AlertFrequencyReporter(client).get_alert_frequency("web01")

        params = client.search.call_args[0][0]
        assert params.search.startswith("search index=nagios_archive ")
        assert report.counts == [StateCount("DOWN", 1)]

    def test_from_env_requires_credentials(self, monkeypatch):
        monkeypatch.setenv('SPLUNK_URL', 'https://splunk.example.com:8089/services/search/jobs')

        with pytest.raises(ConfigurationError):
            AlertFrequencyReporter.from_env()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('SPLUNK_URL', 'https://splunk.example.com:8089/services/search/jobs')
        monkeypatch.setenv('SPLUNK_USERNAME', 'nagios')
        monkeypatch.setenv('SPLUNK_PASSWORD', 's3cret')

        reporter = AlertFrequencyReporter.from_env()

        assert reporter.client.config.host == "splunk.example.com"
        assert reporter.raise_on_transport_error is False
