"""Tests for DocumentRegistrar traversal, profiles and scoping."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from blueprint.environment import Environment
from blueprint.errors import ReaderContextError
from blueprint.reader import (
    DefaultElementParser,
    DocumentRegistrar,
    NamespaceHandlerResolver,
    create_default_dispatcher,
    create_reader,
)
from blueprint.scope import ScopeContext


class TestRegisterDocument:
    """Tests for register_document entry checks."""

    def test_missing_context_raises(self, parse_components) -> None:
        """A missing reader context is a usage error and aborts."""
        registrar = DocumentRegistrar(create_default_dispatcher())

        with pytest.raises(ReaderContextError, match="No ReaderContext available"):
            registrar.register_document(parse_components(), None)

    def test_returns_root_scope(self, parse_components, make_context) -> None:
        registrar = DocumentRegistrar(create_default_dispatcher())

        scope = registrar.register_document(
            parse_components(default_lazy_init="true"), make_context()
        )

        assert isinstance(scope, ScopeContext)
        assert scope.lazy_init is True
        assert scope.depth == 0


class TestProfiles:
    """Tests for profile-gated sub-trees."""

    def test_rejected_profile_registers_nothing(self, reader, registry, reporter, components_xml) -> None:
        """A rejected profile skips the whole sub-tree without reporting errors."""
        reader.load_string(
            components_xml(
                '<component id="a" class="app.A"/><alias name="a" alias="b"/>'
                '<import resource=""/>',
                profile="prod",
            )
        )

        assert registry.definition_count == 0
        assert not registry.is_alias("b")
        assert reporter.errors == []

    @pytest.mark.parametrize("profile", ["default", "!prod", "prod, default", "prod;default"])
    def test_accepted_profile(self, reader, registry, components_xml, profile: str) -> None:
        reader.load_string(components_xml('<component id="a" class="app.A"/>', profile=profile))

        assert registry.contains_definition("a")

    def test_active_profile(self, registry, components_xml) -> None:
        reader = create_reader(
            registry=registry, environment=Environment(["prod"], use_os_environ=False)
        )

        reader.load_string(components_xml('<component id="a" class="app.A"/>', profile="prod"))

        assert registry.contains_definition("a")

    def test_nested_profile_skips_only_nested(self, reader, registry, reporter, components_xml) -> None:
        """A rejected nested sub-tree does not affect its siblings."""
        reader.load_string(
            components_xml(
                '<component id="before" class="app.A"/>'
                '<components profile="prod"><component id="skipped" class="app.B"/></components>'
                '<component id="after" class="app.C"/>'
            )
        )

        assert registry.definition_names() == ["before", "after"]
        assert reporter.errors == []

    def test_invalid_profile_is_reported(self, reader, registry, reporter, components_xml) -> None:
        reader.load_string(components_xml('<component id="a" class="app.A"/>', profile="dev, !"))

        assert reporter.messages() == ["Invalid profile specification [dev, !]"]
        assert registry.definition_count == 0

    def test_skipped_scope_still_fires_defaults_event(self, reader, listener, components_xml) -> None:
        reader.load_string(components_xml(profile="prod"))

        assert len(listener.defaults) == 1


class TestScoping:
    """Tests for default settings of nested <components> elements."""

    def test_nested_defaults_do_not_leak_to_siblings(self, reader, registry, components_xml) -> None:
        """Nested default-lazy-init applies to descendants only."""
        reader.load_string(
            components_xml(
                '<component id="before" class="app.A"/>'
                '<components default-lazy-init="true">'
                '  <component id="inner" class="app.B"/>'
                '  <components><component id="deep" class="app.C"/></components>'
                "</components>"
                '<component id="after" class="app.D"/>'
            )
        )

        assert registry.get_definition("before").lazy_init is False
        assert registry.get_definition("inner").lazy_init is True
        assert registry.get_definition("deep").lazy_init is True
        assert registry.get_definition("after").lazy_init is False

    def test_nested_scope_overrides_root(self, reader, registry, components_xml) -> None:
        reader.load_string(
            components_xml(
                '<components default-lazy-init="false" default-init-method="boot">'
                '  <component id="inner" class="app.B"/>'
                "</components>"
                '<component id="outer" class="app.A"/>',
                default_lazy_init="true",
                default_init_method="start",
            )
        )

        inner = registry.get_definition("inner")
        outer = registry.get_definition("outer")
        assert (inner.lazy_init, inner.init_method) == (False, "boot")
        assert (outer.lazy_init, outer.init_method) == (True, "start")

    def test_defaults_event_per_scope(self, reader, listener, components_xml) -> None:
        reader.load_string(
            components_xml("<components><components/></components><components/>")
        )

        assert [event.scope.depth for event in listener.defaults] == [0, 1, 2, 1]


class TestRoundTrip:
    """Tests for registering N components."""

    @pytest.mark.parametrize("count", [0, 1, 7])
    def test_n_components_registered(self, reader, registry, reporter, components_xml, count: int) -> None:
        body = "".join(
            f'<component id="service{i}" class="app.Service{i}"/>' for i in range(count)
        )

        registered = reader.load_string(components_xml(body))

        assert registered == count
        assert registry.definition_count == count
        for i in range(count):
            assert registry.get_definition(f"service{i}").class_name == f"app.Service{i}"
        assert reporter.errors == []


class TestDispatch:
    """Tests for routing children to handlers and the element parser."""

    def test_unrecognized_default_element_is_ignored(self, reader, registry, reporter, components_xml) -> None:
        """Unknown default names are a silent no-op, not an error."""
        reader.load_string(
            components_xml('<bean id="x"/><component id="a" class="app.A"/>')
        )

        assert reporter.errors == []
        assert registry.definition_names() == ["a"]

    def test_comments_are_skipped(self, reader, registry, reporter, components_xml) -> None:
        reader.load_string(
            components_xml('<!-- services --><component id="a" class="app.A"/><?pi data?>')
        )

        assert reporter.errors == []
        assert registry.definition_names() == ["a"]

    def test_custom_child_goes_to_namespace_handler(self, registry, reporter, components_xml) -> None:
        handler = Mock()
        resolver = NamespaceHandlerResolver()
        resolver.register("urn:tasks", handler)
        reader = create_reader(
            registry=registry,
            reporter=reporter,
            element_parser=DefaultElementParser(resolver),
        )

        reader.load_string(components_xml('<t:schedule xmlns:t="urn:tasks" cron="* * *"/>'))

        handler.parse.assert_called_once()
        elem, context, scope = handler.parse.call_args.args
        assert elem.get("cron") == "* * *"
        assert scope.depth == 0
        assert reporter.errors == []

    def test_custom_root_is_handed_over_whole(self, registry, reporter) -> None:
        handler = Mock()
        resolver = NamespaceHandlerResolver()
        resolver.register("urn:tasks", handler)
        reader = create_reader(
            registry=registry,
            reporter=reporter,
            element_parser=DefaultElementParser(resolver),
        )

        reader.load_string('<t:tasks xmlns:t="urn:tasks"><t:schedule/></t:tasks>')

        handler.parse.assert_called_once()
        assert handler.parse.call_args.args[0].tag == "{urn:tasks}tasks"

    def test_unknown_custom_namespace_reports_error(self, reader, reporter, components_xml) -> None:
        reader.load_string(components_xml('<x:thing xmlns:x="urn:unknown"/>'))

        assert reporter.messages() == [
            "Unable to locate namespace handler for namespace [urn:unknown]"
        ]

    def test_document_without_namespace(self, reader, registry) -> None:
        """Elements without a namespace belong to the default vocabulary."""
        reader.load_string('<components><component id="a" class="app.A"/></components>')

        assert registry.contains_definition("a")


class TestHooks:
    """Tests for pre_process and post_process."""

    def test_hooks_wrap_each_scope(self, parse_components, make_context) -> None:
        calls: list[tuple[str, int]] = []

        class RecordingRegistrar(DocumentRegistrar):
            def pre_process(self, root, context, scope) -> None:
                calls.append(("pre", scope.depth))

            def post_process(self, root, context, scope) -> None:
                calls.append(("post", scope.depth))

        registrar = RecordingRegistrar(create_default_dispatcher())

        registrar.register_document(parse_components("<components/>"), make_context())

        assert calls == [("pre", 0), ("pre", 1), ("post", 1), ("post", 0)]

    def test_hooks_skipped_for_rejected_profile(self, parse_components, make_context) -> None:
        registrar = DocumentRegistrar(create_default_dispatcher())
        registrar.pre_process = Mock()
        registrar.post_process = Mock()

        registrar.register_document(parse_components(profile="prod"), make_context())

        registrar.pre_process.assert_not_called()
        registrar.post_process.assert_not_called()


class TestAbsoluteImportFailure:
    """Tests that a failed import leaves earlier definitions in place."""

    def test_missing_absolute_import_keeps_siblings(
        self, reader, registry, reporter, components_xml, tmp_path: Path
    ) -> None:
        missing = tmp_path / "missing.xml"

        reader.load_string(
            components_xml(
                '<component id="a" class="app.A"/>'
                f'<import resource="{missing}"/>'
                '<component id="b" class="app.B"/>'
            )
        )

        assert reporter.messages() == [
            f"Failed to import component definitions from URL location [{missing}]"
        ]
        assert registry.definition_names() == ["a", "b"]
