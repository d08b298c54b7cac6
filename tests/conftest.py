import pytest

from crp.config import Settings
from crp.models import GeocodeHit
from crp.pipeline import Resolver
from fakes import CountingStore, FakeGeocoder, FakeNotifier, FakeReddit, make_post


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=None,
        SMTP_USER=None,
        SMTP_PASSWORD=None,
        TWILIO_ACCOUNT_SID=None,
        BATCH_POST_DELAY_SECONDS=0,
    )


@pytest.fixture
def post_factory():
    return make_post


@pytest.fixture
def janakpuri_hit() -> GeocodeHit:
    return GeocodeHit(lat=28.6219, lng=77.0910, display_name="Janakpuri, Delhi, India")


@pytest.fixture
def resolver_factory(settings, janakpuri_hit):
    """Build a Resolver from fakes; returns the resolver and its collaborators."""

    def build(**overrides):
        parts = {
            "store": CountingStore(),
            "geocoder": FakeGeocoder(hit=janakpuri_hit),
            "reddit": FakeReddit(),
            "authority_notifier": FakeNotifier(),
            "email_notifier": FakeNotifier(),
            "sms_notifier": FakeNotifier(),
        }
        parts.update(overrides)
        sleeps: list[float] = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)

        resolver = Resolver(settings=settings, sleep=fake_sleep, **parts)
        parts["sleeps"] = sleeps
        return resolver, parts

    return build
