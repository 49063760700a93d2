from contextlib import contextmanager

from dbdoc.core.adapters.postgresql import PostgresConnectionProvider
from dbdoc.core.config import DocumenterConfig
from dbdoc.core.documenter import generate_puml, session_factory_for
from dbdoc.core.queries import QueryId
from dbdoc.core.rows import Row

CONFIG = DocumenterConfig(
    schemas=["core", "sales"], host="h", database="d", username="u", password="p"
)


def test_session_factory_for_postgresql():
    assert isinstance(session_factory_for(CONFIG), PostgresConnectionProvider)


def test_generate_puml_renders_every_schema_in_order():
    class _Executor:
        def execute(self, query_id, *params):
            if query_id is QueryId.VIEW_INFO:
                return [Row({"table_name": f"{params[0]}_view"})]
            return []

    @contextmanager
    def session():
        yield _Executor()

    puml = generate_puml(CONFIG, session_factory=session)

    assert puml.index('package "core"') < puml.index('package "sales"')
    assert '\tentity "core_view" <<view>> {\n\t}\n' in puml
    assert puml.endswith("@enduml\n")
