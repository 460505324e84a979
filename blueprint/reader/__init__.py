"""Registration of component definitions from XML documents."""

from blueprint.reader.config import create_default_dispatcher, create_reader, create_registrar
from blueprint.reader.dispatch import ElementHandler, ElementHandlerRegistry, ElementKind
from blueprint.reader.document_reader import DocumentReader
from blueprint.reader.element_parser import (
    DefaultElementParser,
    NamespaceHandler,
    NamespaceHandlerResolver,
    PropertyNamespaceHandler,
)
from blueprint.reader.problems import (
    CollectingProblemReporter,
    CollectingReaderEventListener,
    EmptyReaderEventListener,
    FailFastProblemReporter,
    Problem,
)
from blueprint.reader.protocols import ReaderContext
from blueprint.reader.registrar import DocumentRegistrar

__all__ = [
    "CollectingProblemReporter",
    "CollectingReaderEventListener",
    "DefaultElementParser",
    "DocumentReader",
    "DocumentRegistrar",
    "ElementHandler",
    "ElementHandlerRegistry",
    "ElementKind",
    "EmptyReaderEventListener",
    "FailFastProblemReporter",
    "NamespaceHandler",
    "NamespaceHandlerResolver",
    "Problem",
    "PropertyNamespaceHandler",
    "ReaderContext",
    "create_default_dispatcher",
    "create_reader",
    "create_registrar",
]
