import pytest

from knowledge.entity_models import Entity, EntityType
from knowledge.extraction_tables import ExtractionTables

SAMPLE_TEXT = "张三在北京创建了华为公司。华为公司位于深圳市。"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Give every test a fresh process-wide cache and table set."""
    import knowledge.singletons as singletons

    yield
    singletons.cleanup_singletons()


@pytest.fixture
def sample_text():
    return SAMPLE_TEXT


@pytest.fixture
def empty_tables():
    """Tables with no patterns, gazetteer or keywords, for isolating one concern."""
    return ExtractionTables.build({}, [], {})


def make_entity(name, entity_type=EntityType.LOCATION, document_ids=("doc-1",), frequency=1):
    entity_type = EntityType(entity_type)
    return Entity(
        id=f"{entity_type.value}:{name}",
        name=name,
        type=entity_type,
        document_ids=list(document_ids),
        frequency=frequency,
    )


@pytest.fixture
def entity_factory():
    return make_entity
