"""Pytest configuration and fixtures."""

import pytest

from redline.core.config import Settings
from redline.models.redline import Section


@pytest.fixture
def settings():
    """Default comparator settings, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def no_sections():
    """Section extractor that finds no headings."""
    return lambda html: []


@pytest.fixture
def contract_sections():
    """Section extractor returning two fixed sections."""
    def extractor(html):
        return [
            Section(heading="1. Payment", body="The fee is $100 per month.", level=2, word_count=6),
            Section(heading="2. Term", body="This agreement lasts one year.", level=2, word_count=5),
        ]
    return extractor


@pytest.fixture
def contract_text():
    """Plain text of a short two-section contract."""
    return (
        "1. Payment\n\n"
        "The fee is $100 per month.\n\n"
        "2. Term\n\n"
        "This agreement lasts one year."
    )
