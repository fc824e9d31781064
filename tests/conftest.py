"""Shared test fixtures."""

import pytest


class FakeRedis:
    """Dict-backed stand-in for the handful of redis commands the store uses."""

    def __init__(self):
        self.strings = {}
        self.hashes = {}
        self.sets = {}

    def incr(self, key):
        self.strings[key] = int(self.strings.get(key, 0)) + 1
        return self.strings[key]

    def hsetnx(self, key, field, value):
        h = self.hashes.setdefault(key, {})
        if field in h:
            return 0
        h[field] = str(value).encode()
        return 1

    def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    def set(self, key, value):
        self.strings[key] = value.encode()

    def get(self, key):
        return self.strings.get(key)

    def sadd(self, key, member):
        self.sets.setdefault(key, set()).add(str(member).encode())

    def smembers(self, key):
        return set(self.sets.get(key, set()))

    def srem(self, key, member):
        self.sets.get(key, set()).discard(str(member).encode())


@pytest.fixture
def fake_redis():
    return FakeRedis()
