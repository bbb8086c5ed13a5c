import time
from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest
import requests

from locshare.client import (
    ConsentPromptProvider,
    EnrichmentResolver,
    FixedPositionProvider,
    GeolocationAcquirer,
    LocationSharePipeline,
    PositionProvider,
    SubmissionClient,
    build_capture_payload,
    generate_session_id,
)
from locshare.errors import AcquisitionTimeout, PermissionDenied, SubmissionFailure
from locshare.models import CapturePayload, Enrichment, Position
from locshare.utils.geolocation import ADDRESS_NOT_AVAILABLE, UNKNOWN_IP


class SlowProvider(FixedPositionProvider):
    def current_position(self, high_accuracy, maximum_age):
        time.sleep(0.5)
        return super().current_position(high_accuracy, maximum_age)


class StaleProvider(FixedPositionProvider):
    def current_position(self, high_accuracy, maximum_age):
        return Position(
            latitude=self.latitude,
            longitude=self.longitude,
            captured_at=datetime.now(timezone.utc) - timedelta(minutes=5),
        )


class NoPermissionApiProvider(PositionProvider):
    def __init__(self, granted):
        self.granted = granted

    def request_permission(self):
        return self.granted

    def current_position(self, high_accuracy, maximum_age):
        return Position(latitude=1.0, longitude=2.0)


def test_acquire_fixed_position():
    position = GeolocationAcquirer(FixedPositionProvider(37.77, -122.41)).acquire()
    assert (position.latitude, position.longitude) == (37.77, -122.41)


def test_consent_declined_is_permission_denied():
    ask = mock.Mock(return_value="n")
    acquirer = GeolocationAcquirer(ConsentPromptProvider(FixedPositionProvider(1.0, 2.0), ask=ask))
    with pytest.raises(PermissionDenied):
        acquirer.acquire()
    ask.assert_called_once()


def test_consent_granted_is_remembered():
    ask = mock.Mock(return_value="yes")
    provider = ConsentPromptProvider(FixedPositionProvider(1.0, 2.0), ask=ask)
    acquirer = GeolocationAcquirer(provider)

    assert acquirer.previously_granted() is False
    acquirer.acquire()
    assert acquirer.previously_granted() is True
    acquirer.acquire()
    ask.assert_called_once()


def test_acquire_times_out():
    acquirer = GeolocationAcquirer(SlowProvider(1.0, 2.0), timeout=0.05)
    with pytest.raises(AcquisitionTimeout):
        acquirer.acquire()


def test_stale_position_is_rejected():
    with pytest.raises(AcquisitionTimeout):
        GeolocationAcquirer(StaleProvider(1.0, 2.0)).acquire()


def test_provider_without_permission_query_prompts():
    assert GeolocationAcquirer(NoPermissionApiProvider(True)).acquire().latitude == 1.0
    with pytest.raises(PermissionDenied):
        GeolocationAcquirer(NoPermissionApiProvider(False)).acquire()


def test_session_id_shape():
    session_id = generate_session_id(now=1700000000.5)
    assert session_id.startswith("1700000000500")
    suffix = session_id[len("1700000000500"):]
    assert len(suffix) == 9
    assert suffix.isalnum() and suffix == suffix.lower()


def test_build_capture_payload():
    position = Position(latitude=37.77, longitude=-122.41)
    enrichment = Enrichment(address="San Francisco", ip="203.0.113.9")
    payload = build_capture_payload(position, enrichment, device_info={"language": "en-US"}, user_agent="ua/1.0")
    assert payload.latitude == 37.77
    assert payload.address == "San Francisco"
    assert payload.ip == "203.0.113.9"
    assert payload.userAgent == "ua/1.0"
    assert payload.deviceInfo == {"language": "en-US"}
    assert payload.sessionId


def test_build_capture_payload_collects_device_info():
    payload = build_capture_payload(Position(latitude=1.0, longitude=2.0), Enrichment(address="", ip=UNKNOWN_IP))
    assert set(payload.deviceInfo) == {"viewport", "language", "platform", "cookieEnabled"}
    assert payload.userAgent.startswith("locshare/")


def test_enrichment_resolver_uses_lookups():
    geolocation = mock.Mock()
    geolocation.reverse_geocode.return_value = "Somewhere"
    geolocation.public_ip.return_value = "198.51.100.1"
    result = EnrichmentResolver(geolocation).resolve(Position(latitude=1.0, longitude=2.0))
    assert result == Enrichment(address="Somewhere", ip="198.51.100.1")
    geolocation.reverse_geocode.assert_called_once_with(1.0, 2.0)


def test_enrichment_resolver_never_raises():
    geolocation = mock.Mock()
    geolocation.reverse_geocode.side_effect = RuntimeError("boom")
    geolocation.public_ip.side_effect = RuntimeError("boom")
    result = EnrichmentResolver(geolocation).resolve(Position(latitude=1.0, longitude=2.0))
    assert result == Enrichment(address=ADDRESS_NOT_AVAILABLE, ip=UNKNOWN_IP)


def _payload():
    return build_capture_payload(
        Position(latitude=1.0, longitude=2.0),
        Enrichment(address="", ip=UNKNOWN_IP),
        device_info={},
        user_agent="ua",
    )


def test_submission_posts_once():
    session = mock.Mock(spec=requests.Session)
    session.post.return_value = mock.Mock(ok=True, status_code=201, json=mock.Mock(return_value={"success": True}))
    result = SubmissionClient("http://api.example/location", session=session).submit(_payload())
    assert result == {"success": True}
    session.post.assert_called_once()
    args, kwargs = session.post.call_args
    assert args == ("http://api.example/location",)
    assert kwargs["json"]["latitude"] == 1.0


def test_submission_non_2xx_is_not_retried():
    session = mock.Mock(spec=requests.Session)
    session.post.return_value = mock.Mock(
        ok=False,
        status_code=500,
        reason="Internal Server Error",
        json=mock.Mock(return_value={"success": False, "message": "Error saving location data"}),
    )
    with pytest.raises(SubmissionFailure) as excinfo:
        SubmissionClient("http://api.example/location", session=session).submit(_payload())
    assert str(excinfo.value) == "Database error: Error saving location data"
    assert excinfo.value.status_code == 500
    assert session.post.call_count == 1


@pytest.mark.parametrize("status_code", [300, 302, 304])
def test_submission_redirect_status_is_failure(status_code):
    session = mock.Mock(spec=requests.Session)
    session.post.return_value = mock.Mock(
        ok=True,
        status_code=status_code,
        reason="Redirect",
        json=mock.Mock(side_effect=ValueError("no body")),
    )
    with pytest.raises(SubmissionFailure) as excinfo:
        SubmissionClient("http://api.example/location", session=session).submit(_payload())
    assert excinfo.value.status_code == status_code
    assert str(excinfo.value) == "Database error: Redirect"
    assert session.post.call_count == 1


def test_submission_network_error():
    session = mock.Mock(spec=requests.Session)
    session.post.side_effect = requests.ConnectionError("refused")
    with pytest.raises(SubmissionFailure) as excinfo:
        SubmissionClient("http://api.example/location", session=session).submit(_payload())
    assert str(excinfo.value).startswith("Network error:")
    assert session.post.call_count == 1


def _pipeline(provider, geolocation, submitter):
    return LocationSharePipeline(
        GeolocationAcquirer(provider),
        EnrichmentResolver(geolocation),
        submitter,
        device_info={},
        user_agent="ua",
    )


def test_pipeline_denied_submits_nothing():
    submitter = mock.Mock()
    geolocation = mock.Mock()
    provider = ConsentPromptProvider(FixedPositionProvider(1.0, 2.0), ask=lambda _: "no")
    with pytest.raises(PermissionDenied):
        _pipeline(provider, geolocation, submitter).run()
    submitter.submit.assert_not_called()
    geolocation.reverse_geocode.assert_not_called()


def test_pipeline_submits_with_fallbacks_when_lookups_fail():
    submitter = mock.Mock()
    submitter.submit.return_value = {"success": True}
    geolocation = mock.Mock()
    geolocation.reverse_geocode.return_value = ADDRESS_NOT_AVAILABLE
    geolocation.public_ip.return_value = UNKNOWN_IP

    result = _pipeline(FixedPositionProvider(1.0, 2.0), geolocation, submitter).run()

    assert result == {"success": True}
    (payload,), _ = submitter.submit.call_args
    assert isinstance(payload, CapturePayload)
    assert payload.address == ADDRESS_NOT_AVAILABLE
    assert payload.ip == UNKNOWN_IP


def test_unreachable_geocoder_still_stores_record(client):
    geolocation = mock.Mock()
    geolocation.reverse_geocode.side_effect = requests.ConnectionError("geocoder unreachable")
    geolocation.public_ip.return_value = UNKNOWN_IP
    position = Position(latitude=40.71, longitude=-74.0)

    enrichment = EnrichmentResolver(geolocation).resolve(position)
    payload = build_capture_payload(position, enrichment, device_info={}, user_agent="ua")
    resp = client.post("/api/location", json=payload.model_dump(mode="json"))

    assert resp.status_code == 201
    assert resp.json()["data"]["address"] == ADDRESS_NOT_AVAILABLE
