"""Shared fixtures: a controllable clock, a recording mail sender and an app."""

import pytest
from fastapi.testclient import TestClient

from clinic_notify.config import Settings
from clinic_notify.main import create_app
from clinic_notify.services.otp import OtpStore
from tests.fakes import FakeClock, FakeMailSender


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def otp_store(clock):
    return OtpStore(ttl_seconds=300, code_length=6, clock=clock)


@pytest.fixture
def sender():
    return FakeMailSender()


@pytest.fixture
def settings():
    return Settings(
        email_sender="clinic@example.com",
        otp_debug=True,
        otp_ttl_seconds=300,
        otp_length=6,
        mail_transport="smtp",
        organization_name="Hospital Administration",
    )


@pytest.fixture
def client(settings, otp_store, sender):
    app = create_app(settings=settings, otp_store=otp_store, mail_sender=sender)
    with TestClient(app) as test_client:
        yield test_client
