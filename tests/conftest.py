"""Shared pytest configuration; fixtures live in tests/fixtures/."""

pytest_plugins = [
    "tests.fixtures.stores",
    "tests.fixtures.app_client",
    "tests.fixtures.mocked_aws",
]
