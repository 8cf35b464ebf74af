"""Test basic package functionality."""

import pirsch_client


def test_version():
    """Test that package version is defined."""
    assert hasattr(pirsch_client, "__version__")
    assert pirsch_client.__version__ == "0.1.0"
