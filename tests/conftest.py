"""Shared test fixtures for blueprint tests."""

from pathlib import Path

import pytest

from blueprint.config import DEFAULT_NAMESPACE, PROPERTY_NAMESPACE
from blueprint.environment import Environment
from blueprint.reader import (
    CollectingProblemReporter,
    CollectingReaderEventListener,
    create_reader,
)
from blueprint.registry import ComponentDefinitionRegistry


@pytest.fixture
def registry() -> ComponentDefinitionRegistry:
    return ComponentDefinitionRegistry()


@pytest.fixture
def reporter() -> CollectingProblemReporter:
    return CollectingProblemReporter()


@pytest.fixture
def listener() -> CollectingReaderEventListener:
    return CollectingReaderEventListener()


@pytest.fixture
def environment() -> Environment:
    """Environment with no active profiles, isolated from os.environ."""
    return Environment(active_profiles=[], use_os_environ=False)


@pytest.fixture
def reader(registry, environment, reporter, listener):
    return create_reader(
        registry=registry, environment=environment, reporter=reporter, listener=listener
    )


@pytest.fixture
def components_xml():
    """Factory fixture that wraps body XML in a <components> root.

    Keyword arguments become root attributes, with underscores turned into
    dashes.

    Usage:
        def test_example(components_xml):
            xml = components_xml('<component id="a" class="A"/>', default_lazy_init="true")
    """

    def _wrap(body: str = "", **attributes: str) -> str:
        attrs = "".join(
            f' {name.replace("_", "-")}="{value}"' for name, value in attributes.items()
        )
        return (
            f'<components xmlns="{DEFAULT_NAMESPACE}" xmlns:p="{PROPERTY_NAMESPACE}"{attrs}>'
            f"{body}</components>"
        )

    return _wrap


@pytest.fixture
def write_document(tmp_path, components_xml):
    """Factory fixture that writes a <components> document below tmp_path.

    Usage:
        def test_example(write_document):
            path = write_document("conf/main.xml", '<import resource="db.xml"/>')
    """

    def _write(relative: str, body: str = "", **attributes: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(components_xml(body, **attributes), encoding="utf-8")
        return path

    return _write
