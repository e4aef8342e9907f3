"""Pytest configuration and fixtures for criteria tests."""

import pytest
from dotenv import load_dotenv

from crossquery.querydsl.criteria import Criteria
from crossquery.querydsl.nodes import term
from crossquery.settings import QueryConfig

# Load environment variables
load_dotenv()


@pytest.fixture
def config():
    """Join modes matching the library defaults, independent of the environment."""
    return QueryConfig(query_mode="must", filter_mode="and")


@pytest.fixture
def criteria(config):
    """Empty criteria built from the default config."""
    return Criteria(config=config)


@pytest.fixture
def city_filter():
    return term("name", "Moscow")


@pytest.fixture
def make_criteria(config):
    """Factory building criteria from the default config plus option overrides."""

    def _make(**options):
        return Criteria(options or None, config=config)

    return _make
