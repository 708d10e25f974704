import os
import sys
import pytest

os.environ.setdefault("SERVICE_AUTH_SECRET", "test-secret-for-community-messaging-tests")

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + "/.."))

from dishka import Provider, Scope, make_async_container, provide
from fastapi.testclient import TestClient

from community_messaging.domain.ports.realtime_feed import RealtimeFeed
from community_messaging.domain.ports.repositories import NotificationRepository, RecordStore
from community_messaging.fastapi_app import create_fastapi_app
from community_messaging.setup.ioc import HandlerProvider
from fakes import (
    InMemoryFeed,
    InMemoryRecordStore,
    RecordingNotificationRepository,
)


class FakeInfrastructureProvider(Provider):
    def __init__(self, store, feed, notifications):
        super().__init__()
        self._store = store
        self._feed = feed
        self._notifications = notifications

    @provide(scope=Scope.APP)
    def get_realtime_feed(self) -> RealtimeFeed:
        return self._feed

    @provide(scope=Scope.REQUEST)
    def get_record_store(self) -> RecordStore:
        return self._store

    @provide(scope=Scope.REQUEST)
    def get_notification_repository(self) -> NotificationRepository:
        return self._notifications


@pytest.fixture()
def feed():
    return InMemoryFeed()


@pytest.fixture()
def store(feed):
    return InMemoryRecordStore(feed=feed)


@pytest.fixture()
def notifications():
    return RecordingNotificationRepository()


@pytest.fixture()
def app(store, feed, notifications):
    """FastAPI app wired to the in-memory store, feed and notifications."""
    container = make_async_container(
        FakeInfrastructureProvider(store, feed, notifications), HandlerProvider()
    )
    return create_fastapi_app(container)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
