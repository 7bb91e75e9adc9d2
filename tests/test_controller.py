"""
Tests for LifxBridge host operations.

The HTTP session is a mock, so these tests check which requests are made and
how the cache reacts to their outcome.
"""

import logging

import pytest
import requests

from conftest import make_response
from core.controller import LifxBridge
from core.errors import LifxAPIError


class TestMetadata:
    """Manifest and configuration schema are static."""

    def test_manifest(self, bridge):
        assert bridge.get_manifest() == {
            'Id': 'lifx',
            'Name': 'LIFX Integration Plugin',
            'Author': 'Nacdlow',
            'Version': 'v0.1.0',
        }

    def test_manifest_identical_on_every_call(self, bridge):
        assert bridge.get_manifest() == bridge.get_manifest()

    def test_configuration_schema(self, bridge):
        schema = bridge.get_plugin_configuration()
        assert len(schema) == 1
        entry = schema[0]
        assert entry['Key'] == 'pak'
        assert entry['Title'] == 'Personal Integration Token'
        assert entry['Description'] == 'Get your token from cloud.lifx.com!'
        assert entry['Type'] == 0
        assert entry['IsUserSpecific'] is False
        assert schema == bridge.get_plugin_configuration()

    def test_metadata_makes_no_requests(self, bridge, session):
        bridge.get_manifest()
        bridge.get_plugin_configuration()
        bridge.get_web_extensions()
        session.get.assert_not_called()
        session.put.assert_not_called()

    def test_web_extensions_empty(self, bridge):
        assert bridge.get_web_extensions() == []

    def test_on_load_logs(self, bridge, caplog):
        with caplog.at_level(logging.DEBUG, logger='core.controller'):
            bridge.on_load()
        assert 'Loading LIFX integration plugin' in caplog.text


class TestConfigurationUpdate:
    """Token delivered by the host is used for later requests."""

    def test_token_applied(self, session):
        bridge = LifxBridge(session=session)
        session.put.return_value = make_response(207)

        bridge.on_configuration_update([{'Key': 'pak', 'Value': ' secret '}])
        bridge.set_device_power('d1', True)

        headers = session.put.call_args.kwargs['headers']
        assert bridge.token == 'secret'
        assert headers['Authorization'] == 'Bearer secret'

    def test_lowercase_keys_accepted(self, bridge):
        bridge.on_configuration_update([{'key': 'pak', 'value': 'xyz'}])
        assert bridge.token == 'xyz'

    def test_unknown_keys_ignored(self, bridge):
        bridge.on_configuration_update([{'Key': 'other', 'Value': 'x'}])
        assert bridge.token == 'abc'

    def test_empty_update(self, bridge):
        bridge.on_configuration_update([])
        bridge.on_configuration_update(None)
        assert bridge.token == 'abc'


class TestAvailableDevices:
    """Listing and refresh behaviour."""

    def test_single_device_scenario(self, bridge, session):
        session.get.return_value = make_response(200, [
            {'id': 'd1', 'power': 'on', 'product': {'company': 'LIFX', 'name': 'A19'}}
        ])

        devices = bridge.get_available_devices()

        assert devices == [
            {'UniqueID': 'd1', 'ManufacturerName': 'LIFX', 'ModelName': 'A19', 'Type': 0}
        ]
        assert bridge.get_device_power('d1') is True

    def test_refresh_request(self, bridge, session, lights_payload):
        session.get.return_value = make_response(200, lights_payload)

        bridge.get_available_devices()

        args, kwargs = session.get.call_args
        assert args[0] == 'https://api.lifx.com/v1/lights/all'
        assert kwargs['headers'] == {'Authorization': 'Bearer abc'}
        assert kwargs['timeout'] == bridge.timeout

    def test_state_cache_matches_response(self, bridge, session, lights_payload):
        session.get.return_value = make_response(200, lights_payload)

        bridge.get_available_devices()

        assert bridge.cache.states() == {'d073d5000001': True, 'd073d5000002': False}

    def test_reads_within_interval_issue_one_request(self, bridge, session, clock, lights_payload):
        session.get.return_value = make_response(200, lights_payload)

        bridge.get_available_devices()
        clock.advance(29)
        bridge.get_device_power('d073d5000001')
        bridge.get_available_devices()

        assert session.get.call_count == 1

    def test_refresh_after_interval(self, bridge, session, clock, lights_payload):
        session.get.return_value = make_response(200, lights_payload)

        bridge.get_available_devices()
        clock.advance(31)
        bridge.get_available_devices()

        assert session.get.call_count == 2

    def test_refresh_replaces_view_list(self, bridge, session, clock, lights_payload):
        session.get.return_value = make_response(200, lights_payload)
        assert len(bridge.get_available_devices()) == 2

        clock.advance(31)
        session.get.return_value = make_response(200, lights_payload[:1])
        devices = bridge.get_available_devices()

        assert [d['UniqueID'] for d in devices] == ['d073d5000001']

    def test_returned_list_is_a_copy(self, bridge, session, lights_payload):
        session.get.return_value = make_response(200, lights_payload)

        devices = bridge.get_available_devices()
        devices.clear()

        assert len(bridge.get_available_devices()) == 2


class TestRefreshFailures:
    """Failed refreshes keep the previous cache and still suppress retries."""

    @pytest.fixture
    def primed(self, bridge, session, clock, lights_payload):
        session.get.return_value = make_response(200, lights_payload)
        bridge.get_available_devices()
        clock.advance(31)
        return bridge

    @pytest.mark.parametrize('failure', [
        requests.exceptions.ConnectionError('connection refused'),
        requests.exceptions.Timeout('timed out'),
    ])
    def test_network_error_keeps_cache(self, primed, session, failure):
        devices_before = primed.cache.available_devices()
        states_before = primed.cache.states()
        session.get.side_effect = failure

        assert primed.get_available_devices() == devices_before
        assert primed.cache.states() == states_before

    def test_failed_refresh_updates_timestamp(self, primed, session, clock):
        session.get.side_effect = requests.exceptions.ConnectionError('down')

        primed.get_available_devices()
        assert primed.cache.last_refresh == clock.now

        clock.advance(10)
        primed.get_device_power('d073d5000001')
        assert session.get.call_count == 2

    def test_http_error_keeps_cache(self, primed, session):
        session.get.return_value = make_response(401, {'error': 'Invalid token'})

        assert len(primed.get_available_devices()) == 2

    def test_invalid_json_keeps_cache(self, primed, session):
        session.get.return_value = make_response(200, json_error=ValueError('Expecting value'))

        assert len(primed.get_available_devices()) == 2
        assert primed.get_device_power('d073d5000001') is True

    def test_non_list_body_keeps_cache(self, primed, session):
        session.get.return_value = make_response(200, {'error': 'unexpected'})

        assert len(primed.get_available_devices()) == 2

    def test_failure_is_logged(self, primed, session, caplog):
        session.get.side_effect = requests.exceptions.ConnectionError('down')

        with caplog.at_level(logging.ERROR, logger='core.controller'):
            primed.get_available_devices()

        assert 'get available:' in caplog.text

    def test_first_refresh_failure_gives_empty(self, bridge, session):
        session.get.side_effect = requests.exceptions.ConnectionError('down')

        assert bridge.get_available_devices() == []
        assert bridge.get_device_power('d1') is False


class TestDevicePower:
    """Power queries and toggles."""

    def test_unknown_device_is_off(self, bridge, session):
        session.get.return_value = make_response(200, [])

        assert bridge.get_device_power('missing') is False

    def test_toggle_request(self, bridge, session):
        session.put.return_value = make_response(207)

        bridge.set_device_power('d1', True)

        args, kwargs = session.put.call_args
        assert args[0] == 'https://api.lifx.com/v1/lights/id:d1/state'
        assert kwargs['data'] == {'power': 'on'}
        assert kwargs['headers']['Authorization'] == 'Bearer abc'
        assert kwargs['headers']['Content-Type'] == 'application/x-www-form-urlencoded'
        assert kwargs['timeout'] == bridge.timeout

    def test_toggle_off_body(self, bridge, session):
        session.put.return_value = make_response(200)

        bridge.set_device_power('d1', False)

        assert session.put.call_args.kwargs['data'] == {'power': 'off'}

    def test_toggle_updates_cache_before_refresh(self, bridge, session):
        session.put.return_value = make_response(207)

        bridge.set_device_power('d1', True)

        assert bridge.cache.get_power('d1') is True
        session.get.assert_not_called()

    def test_toggle_off_then_read_within_interval(self, bridge, session):
        session.get.return_value = make_response(200, [
            {'id': 'd1', 'power': 'on', 'product': {'company': 'LIFX', 'name': 'A19'}}
        ])
        session.put.return_value = make_response(200)
        assert bridge.get_device_power('d1') is True

        bridge.set_device_power('d1', False)

        assert bridge.get_device_power('d1') is False
        assert session.get.call_count == 1

    def test_toggle_during_refresh_survives(self, bridge, session):
        session.put.return_value = make_response(207)

        def toggle_mid_fetch(*args, **kwargs):
            bridge.set_device_power('d1', True)
            return make_response(200, [{'id': 'd1', 'power': 'off'}])

        session.get.side_effect = toggle_mid_fetch

        assert bridge.get_device_power('d1') is True
        assert len(bridge.get_available_devices()) == 1

    def test_toggle_network_error_raises(self, bridge, session):
        session.put.side_effect = requests.exceptions.ConnectionError('down')

        with pytest.raises(LifxAPIError) as exc_info:
            bridge.set_device_power('d1', True)

        assert exc_info.value.operation == 'on toggle'
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)
        assert bridge.cache.states() == {}

    def test_toggle_http_error_leaves_cache(self, bridge, session):
        bridge.cache.set_power('d1', False)
        session.put.return_value = make_response(404, {'error': 'Could not find id:d1'})

        with pytest.raises(LifxAPIError) as exc_info:
            bridge.set_device_power('d1', True)

        assert exc_info.value.status_code == 404
        assert bridge.cache.get_power('d1') is False

    def test_toggle_failure_logged(self, bridge, session, caplog):
        session.put.side_effect = requests.exceptions.Timeout('timed out')

        with caplog.at_level(logging.ERROR, logger='core.controller'):
            with pytest.raises(LifxAPIError):
                bridge.set_device_power('d1', True)

        assert 'on toggle:' in caplog.text


class TestFetchDevices:
    """Direct device fetch used by the diagnostic commands."""

    def test_parses_devices(self, bridge, session, lights_payload):
        session.get.return_value = make_response(200, lights_payload)

        devices = bridge.fetch_devices()

        assert [d.label for d in devices] == ['Kitchen', 'Bedroom']
        assert bridge.cache.states() == {}

    def test_element_without_id_is_skipped(self, bridge, session, lights_payload, caplog):
        session.get.return_value = make_response(200, [{'label': 'Broken'}] + lights_payload)

        with caplog.at_level(logging.WARNING, logger='models.device'):
            devices = bridge.fetch_devices()

        assert [d.id for d in devices] == ['d073d5000001', 'd073d5000002']
        assert 'Skipping light' in caplog.text

    def test_refresh_keeps_valid_lights(self, bridge, session, lights_payload):
        session.get.return_value = make_response(200, lights_payload + [{'id': None}, 'junk'])

        assert len(bridge.get_available_devices()) == 2
        assert bridge.get_device_power('d073d5000001') is True

    def test_invalid_body_raises(self, bridge, session):
        session.get.return_value = make_response(200, json_error=ValueError('bad'))

        with pytest.raises(LifxAPIError) as exc_info:
            bridge.fetch_devices()

        assert exc_info.value.operation == 'get available'
        assert exc_info.value.status_code == 200


def test_default_timeout():
    """Outbound calls always carry a timeout."""
    assert LifxBridge().timeout == 10
    assert LifxBridge(timeout=2.5).timeout == 2.5
