"""
Orchestrator: owns the output namespace and the URI -> Builder registry.

One Orchestrator serves exactly one generation pass. It is passed to every
Builder explicitly; there is no module-level state, so passes over
different documents cannot interfere.
"""

from __future__ import annotations

import logging

from ..config import CodeGeneratorConfig
from ..errors import GeneratorError
from ..schema_model import Schema
from .builder import Builder
from .ir_nodes import Namespace, TypeModel

logger = logging.getLogger(__name__)


class Orchestrator:
    """Resolves schema nodes to Builders, reusing the Builder of a known URI."""

    def __init__(
        self,
        type_model: TypeModel,
        namespace_name: str = "",
        config: CodeGeneratorConfig | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            type_model: Model receiving all declarations of this pass
            namespace_name: Name of the top-level namespace (e.g. a Java package)
            config: Code generation configuration
        """
        self.config = config or CodeGeneratorConfig()
        self.type_model = type_model
        self.namespace: Namespace = type_model.namespace(namespace_name)
        self._builders: dict[str, Builder] = {}

    @property
    def builders(self) -> dict[str, Builder]:
        return dict(self._builders)

    def register(self, uri: str, builder: Builder) -> None:
        """Record the Builder for ``uri``. Entries are never replaced or removed."""
        if uri in self._builders:
            raise GeneratorError(f"A builder for {uri!r} is already registered")
        self._builders[uri] = builder

    def lookup(self, uri: str) -> Builder | None:
        return self._builders.get(uri)

    def declare_builder(self, schema: Schema) -> Builder:
        """Return the Builder for ``schema``, constructing (but not populating) it if new."""
        builder = self.lookup(schema.uri)
        if builder is None:
            builder = Builder(self, schema)
        return builder

    def get_builder(self, schema: Schema) -> Builder:
        """
        Return the Builder for ``schema``, constructing and populating it if new.

        A Builder that is being populated further up the call stack (a cyclic
        reference) is returned as it is; its type is already declared.
        """
        builder = self.declare_builder(schema)
        builder.populate()
        return builder

    def finish(self) -> None:
        """Populate Builders that were only declared, e.g. parents used as containers."""
        while True:
            pending = [b for b in self._builders.values() if not b.population_started]
            if not pending:
                return
            for builder in pending:
                logger.debug("Populating %s, declared only as a container", builder.schema.uri)
                builder.populate()
