"""Shared fixtures for the relay tests.

No test talks to a real provider: senders are mocks, and the provider
clients are exercised with ``requests`` / ``resend`` patched out.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app import create_app
from composer import MessageComposer
from config import RelayConfig
from mailer import EmailSender


def make_config(**overrides) -> RelayConfig:
    """Build a RelayConfig with test addresses, overriding any setting."""
    settings = {
        "sender_email": "shop@prostich.test",
        "sender_name": "ProStich Formular",
        "recipient_email": "orders@prostich.test",
        "api_key": "test-api-key",
    }
    settings.update(overrides)
    return RelayConfig(**settings)


def make_sender(success: bool = True, message: str = "Email accepted") -> Mock:
    """Return a spy standing in for the send capability."""
    sender = Mock(spec=EmailSender)
    sender.name = "mock"
    sender.send.return_value = (success, message)
    return sender


@pytest.fixture()
def config():
    return make_config()


@pytest.fixture()
def composer(config):
    return MessageComposer(config)


@pytest.fixture()
def sender():
    return make_sender()


@pytest.fixture()
def client(config, sender):
    """TestClient for an app wired to the mock sender."""
    return TestClient(create_app(config=config, sender=sender))
