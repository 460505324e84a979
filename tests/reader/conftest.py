"""Fixtures for reader tests that drive handlers and the registrar directly."""

from unittest.mock import Mock

import pytest
from lxml import etree

from blueprint.reader import DefaultElementParser, ReaderContext
from blueprint.resources import InMemoryResource


@pytest.fixture
def make_context(registry, reporter, listener, environment):
    """Factory fixture for a ReaderContext backed by the shared fixtures.

    The loader defaults to a Mock so tests can assert whether a load was
    attempted.
    """

    def _make(
        resource=None, loader=None, element_parser=None, env=None, target_registry=None
    ) -> ReaderContext:
        return ReaderContext(
            resource=resource or InMemoryResource(b"", "test document"),
            registry=target_registry if target_registry is not None else registry,
            reporter=reporter,
            listener=listener,
            environment=env or environment,
            loader=loader or Mock(),
            element_parser=element_parser or DefaultElementParser(),
        )

    return _make


@pytest.fixture
def parse_components(components_xml):
    """Factory fixture returning the parsed <components> root element."""

    def _parse(body: str = "", **attributes: str) -> etree._Element:
        return etree.fromstring(components_xml(body, **attributes).encode("utf-8"))

    return _parse
