"""pytest configuration and fixtures for html-formgen tests."""

import pytest


@pytest.fixture(autouse=True)
def form_config():
    """Give every test a fresh default configuration."""
    from html_formgen.protocols import FormGenConfig, set_form_config

    config = FormGenConfig()
    set_form_config(config)
    yield config
    set_form_config(FormGenConfig())


@pytest.fixture
def builder():
    """AnnotationBuilder with default settings."""
    from html_formgen.annotation import AnnotationBuilder
    return AnnotationBuilder()


@pytest.fixture
def factory():
    """Form factory with its own input filter factory."""
    from html_formgen.factory import Factory
    return Factory()
