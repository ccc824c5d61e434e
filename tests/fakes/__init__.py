"""Fakes for testing against the Linear API without network access."""

from tests.fakes.linear_api import API_URL, OTHER_TEAM_ID, TEAM_ID, FakeLinearAPI

__all__ = ["API_URL", "OTHER_TEAM_ID", "TEAM_ID", "FakeLinearAPI"]
