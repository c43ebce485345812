"""Shared fixtures for all tests."""
from tests.fixtures.memory_client import memory_client, storage  # noqa: F401
from tests.fixtures.s3_fixtures import (  # noqa: F401
    aws_credentials,
    mocked_aws,
    s3_settings,
    s3_versioned_client,
    s3_storage,
)
