import pytest

from ecolefinder.providers.base import CommuneCandidate, UpstreamUnavailable


class FakeDataset:
    """In-memory dataset: records keyed by postal code, plus an optional department answer."""

    def __init__(self, name, by_cp=None, by_department=None, fail_on=()):
        self.provider_name = name
        self.by_cp = by_cp or {}
        self.by_department = by_department or {}
        self.fail_on = set(fail_on)
        self.calls = []

    async def search(self, commune, *, postal_code=None, department=None):
        self.calls.append((commune, postal_code, department))
        key = postal_code if postal_code is not None else department
        if key in self.fail_on:
            raise self.fail_on_error(key)
        if postal_code is not None:
            return list(self.by_cp.get(postal_code, []))
        return list(self.by_department.get(department, []))

    def fail_on_error(self, key):
        return RuntimeError(f"boom on {key}")


class FakeLookup:
    provider_name = "fake_geo"

    def __init__(self, candidates=None, error=None):
        self.candidates = candidates or []
        self.error = error
        self.calls = []

    async def lookup(self, name, postal_code):
        self.calls.append((name, postal_code))
        if self.error is not None:
            raise self.error
        return list(self.candidates)


@pytest.fixture
def make_record():
    def _make(**fields):
        return {"fields": dict(fields)}
    return _make


@pytest.fixture
def limoges_lookup():
    return FakeLookup([CommuneCandidate(name="Limoges", code="87085", postal_codes=["87000", "87100", "87280"])])


@pytest.fixture
def unreachable_lookup():
    return FakeLookup(error=UpstreamUnavailable("geo_api request failed: connection refused"))


@pytest.fixture
def fake_dataset():
    return FakeDataset
