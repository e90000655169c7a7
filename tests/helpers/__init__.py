"""Reusable fakes for Gavel tests."""

from tests.helpers.docker import docker_available
from tests.helpers.fake_time_authority import FakeTimeAuthority

__all__ = ["FakeTimeAuthority", "docker_available"]
