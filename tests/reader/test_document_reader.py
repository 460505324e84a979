"""Tests for DocumentReader loading, imports and cycle detection."""

from pathlib import Path

import pytest

from blueprint.environment import Environment
from blueprint.errors import DefinitionParsingError, ResourceLoadError
from blueprint.reader import DocumentReader, DocumentRegistrar, create_default_dispatcher, create_reader
from blueprint.resources import FileResource


class TestLoading:
    """Tests for loading single documents."""

    def test_load_path_counts_definitions(self, reader, write_document) -> None:
        path = write_document(
            "app.xml", '<component id="a" class="A"/><component id="b" class="B"/>'
        )

        assert reader.load_path(path) == 2
        assert reader.current_resource is None

    def test_load_by_location_returns_resources(self, reader, write_document) -> None:
        path = write_document("app.xml", '<component id="a" class="A"/>')

        count, resources = reader.load_by_location(str(path))

        assert count == 1
        assert resources == [FileResource(path)]

    def test_load_by_location_glob(self, reader, registry, write_document, tmp_path: Path) -> None:
        write_document("conf/b.xml", '<component id="b" class="B"/>')
        write_document("conf/a.xml", '<component id="a" class="A"/>')

        count, resources = reader.load_by_location(str(tmp_path / "conf" / "*.xml"))

        assert count == 2
        assert registry.definition_names() == ["a", "b"]

    def test_missing_file(self, reader, tmp_path: Path) -> None:
        with pytest.raises(ResourceLoadError, match="Could not read document"):
            reader.load_path(tmp_path / "missing.xml")

    def test_malformed_xml(self, reader) -> None:
        with pytest.raises(ResourceLoadError, match="is invalid"):
            reader.load_string("<components><component></components>", name="broken.xml")

    def test_registry_is_shared_across_loads(self, reader, registry, components_xml) -> None:
        reader.load_string(components_xml('<component id="a" class="A"/>'))
        reader.load_string(components_xml('<component id="b" class="B"/>'))

        assert registry.definition_names() == ["a", "b"]

    def test_fail_fast_reporter(self, registry, components_xml) -> None:
        reader = create_reader(registry=registry, fail_fast=True)

        with pytest.raises(DefinitionParsingError) as exc_info:
            reader.load_string(components_xml('<alias name="a"/>'))

        assert exc_info.value.problem.message == "Alias must not be empty"


class TestImports:
    """Tests for imports between documents on disk."""

    def test_relative_import(self, reader, registry, listener, write_document, tmp_path: Path) -> None:
        """c.cfg imported from a/b.cfg resolves to a/c.cfg."""
        main = write_document("a/b.cfg", '<import resource="c.cfg"/><component id="b" class="B"/>')
        write_document("a/c.cfg", '<component id="c" class="C"/>')

        count = reader.load_path(main)

        assert count == 2
        assert registry.definition_names() == ["c", "b"]
        assert listener.imports[0].resources == (FileResource(tmp_path / "a" / "c.cfg"),)

    def test_relative_import_in_subdirectory(self, reader, registry, write_document) -> None:
        main = write_document("main.xml", '<import resource="services/db.xml"/>')
        write_document("services/db.xml", '<import resource="pool.xml"/>')
        write_document("services/pool.xml", '<component id="pool" class="Pool"/>')

        assert reader.load_path(main) == 1
        assert registry.contains_definition("pool")

    def test_missing_relative_import(self, reader, registry, reporter, write_document) -> None:
        main = write_document(
            "main.xml", '<component id="a" class="A"/><import resource="missing.xml"/>'
        )

        reader.load_path(main)

        assert reporter.messages() == [
            "Failed to import component definitions from relative location [missing.xml]"
        ]
        assert registry.contains_definition("a")

    def test_absolute_import_with_placeholder(self, registry, reporter, write_document, tmp_path: Path) -> None:
        environment = Environment(
            [], properties={"conf.dir": str(tmp_path / "shared")}, use_os_environ=False
        )
        reader = create_reader(registry=registry, environment=environment, reporter=reporter)
        main = write_document("main.xml", '<import resource="${conf.dir}/db.xml"/>')
        write_document("shared/db.xml", '<component id="db" class="Db"/>')

        reader.load_path(main)

        assert reporter.errors == []
        assert registry.contains_definition("db")

    def test_file_url_import(self, reader, registry, write_document, tmp_path: Path) -> None:
        shared = write_document("shared/db.xml", '<component id="db" class="Db"/>')
        main = write_document("main.xml", f'<import resource="{shared.as_uri()}"/>')

        assert reader.load_path(main) == 1
        assert registry.contains_definition("db")

    def test_import_inside_rejected_profile_is_not_loaded(
        self, reader, registry, listener, write_document
    ) -> None:
        main = write_document(
            "main.xml", '<components profile="prod"><import resource="db.xml"/></components>'
        )
        write_document("db.xml", '<component id="db" class="Db"/>')

        reader.load_path(main)

        assert registry.definition_count == 0
        assert listener.imports == []

    def test_cyclic_import_is_reported(self, reader, registry, reporter, write_document) -> None:
        """A document importing itself through another one is reported, not looped."""
        first = write_document("a.xml", '<component id="a" class="A"/><import resource="b.xml"/>')
        write_document("b.xml", '<component id="b" class="B"/><import resource="a.xml"/>')

        count = reader.load_path(first)

        assert count == 2
        assert registry.definition_names() == ["a", "b"]
        assert reporter.messages() == [
            "Failed to import component definitions from relative location [a.xml]"
        ]
        assert "Detected cyclic loading" in str(reporter.errors[0].cause)
        assert reader.current_resource is None

    def test_same_document_imported_twice_is_not_a_cycle(self, reader, registry, reporter, write_document) -> None:
        main = write_document(
            "main.xml", '<import resource="db.xml"/><import resource="db.xml"/>'
        )
        write_document("db.xml", '<component id="db" class="Db"/>')

        reader.load_path(main)

        assert reporter.errors == []
        assert registry.definition_names() == ["db"]

    def test_absolute_import_from_bracketed_directory(
        self, reader, registry, reporter, components_xml, write_document
    ) -> None:
        target = write_document("conf[1]/db.xml", '<component id="db" class="Db"/>')

        reader.load_string(components_xml(f'<import resource="{target}"/>'))

        assert reporter.errors == []
        assert registry.definition_names() == ["db"]

    def test_missing_relative_import_in_bracketed_directory(self, reader, reporter, write_document) -> None:
        main = write_document("x[1]/main.xml", '<import resource="missing.xml"/>')

        reader.load_path(main)

        assert reporter.messages() == [
            "Failed to import component definitions from relative location [missing.xml]"
        ]


class TestCurrentResource:
    """Tests for the loader's view of the document being registered."""

    def test_tracks_imported_documents(self, registry, environment, write_document) -> None:
        """The context resource and the loader's current resource agree at every level."""
        seen: list[tuple[str, bool]] = []

        class RecordingRegistrar(DocumentRegistrar):
            def pre_process(self, root, context, scope) -> None:
                if scope.depth == 0:
                    seen.append(
                        (context.resource.path.name, context.loader.current_resource is context.resource)
                    )

        reader = DocumentReader(
            registry, RecordingRegistrar(create_default_dispatcher()), environment=environment
        )
        main = write_document("main.xml", '<import resource="db.xml"/>')
        write_document("db.xml", '<component id="db" class="Db"/>')

        reader.load_path(main)

        assert seen == [("main.xml", True), ("db.xml", True)]
        assert reader.current_resource is None
