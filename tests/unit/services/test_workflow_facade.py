"""
Unit tests for the composed Workflow facade
"""

import pytest

from locale_workflow.config.settings import ApplicationSettings, WorkflowSettings
from locale_workflow.exceptions import InvalidPrefixError
from locale_workflow.services.doc_indexes import DOC_INDEXES, ensure_doc_indexes
from locale_workflow.services.doc_types import DocTypeRegistry, TypeManager
from locale_workflow.services.workflow import BASE_EXCLUDE_PROPERTIES, Workflow

LOCALES = [
    {"name": "default", "label": "Default", "children": [{"name": "en"}, {"name": "fr"}]},
]


def make_doc_types():
    return DocTypeRegistry(
        doc_types=[
            TypeManager(
                name="article",
                schema=[{"name": "_author", "type": "joinByOne", "withType": "person"}],
            ),
            TypeManager(name="home", is_page=True),
        ]
    )


@pytest.fixture
def workflow():
    return Workflow.compose(
        make_doc_types(),
        locales=LOCALES,
        default_locale="en",
        prefixes=True,
        hostnames={"fr": "fr.example.com"},
        exclude_properties=["internalNotes"],
    )


@pytest.mark.unit
class TestWorkflow:
    def test_compose(self, workflow):
        assert workflow.localized is True
        assert workflow.prefixes.prefix_for("fr-draft") == "/fr"
        assert workflow.exclude_properties[-1] == "internalNotes"
        assert workflow.exclude_properties[: len(BASE_EXCLUDE_PROPERTIES)] == list(BASE_EXCLUDE_PROPERTIES)

    def test_bad_prefix_aborts_composition(self):
        with pytest.raises(InvalidPrefixError):
            Workflow.compose(make_doc_types(), locales=LOCALES, prefixes={"en": "/en/us"})

    def test_before_save_new_page(self, workflow):
        doc = {"type": "home", "title": "Welcome"}

        workflow.before_save(doc, "fr")

        assert doc["workflowLocale"] == "fr-draft"
        assert doc["slug"] == "/fr/welcome"
        assert doc["workflowLocaleForPathIndex"] == "fr-draft"
        assert doc["_workflowNew"] is True

    def test_before_save_piece(self, workflow):
        doc = {"type": "article", "slug": "news", "title": "News"}

        workflow.before_save(doc)

        assert doc["workflowLocale"] == "en-draft"
        assert doc["slug"] == "news"
        assert "workflowLocaleForPathIndex" not in doc

    def test_before_save_excluded_type(self, workflow):
        doc = {"type": "user", "slug": "/users/alice"}

        workflow.before_save(doc, "fr")

        assert doc == {"type": "user", "slug": "/users/alice"}

    def test_find_joins(self, workflow):
        joins = workflow.find_joins({"type": "article", "_author": "p1"})

        assert [(join.field_name, join.value) for join in joins] == [("_author", "p1")]

    def test_resolve_locale(self, workflow):
        assert workflow.resolve_locale("fr") == "fr"
        assert workflow.resolve_locale("fr-draft") == "fr-draft"
        assert workflow.resolve_locale("klingon") == "en"
        assert workflow.resolve_locale(None) == "en"

    def test_locale_for_hostname(self, workflow):
        assert workflow.locale_for_hostname("FR.example.com:443") == "fr"
        assert workflow.locale_for_hostname("example.com") is None
        assert workflow.locale_for_hostname(None) is None

    def test_locale_for_path(self, workflow):
        assert workflow.locale_for_path("/fr/about") == "fr"
        assert workflow.locale_for_path("/fr") == "fr"
        assert workflow.locale_for_path("/french") is None

    def test_context_projection(self, workflow):
        assert workflow.get_context_projection() == {
            "title": 1,
            "slug": 1,
            "path": 1,
            "workflowLocale": 1,
            "tags": 1,
            "type": 1,
        }

    def test_client_options(self, workflow):
        options = workflow.get_client_options("fr", {"workflowGuid": "g-1"})

        assert options.locale == "fr"
        assert options.context_guid == "g-1"
        assert options.prefixes == {"default": "/default", "en": "/en", "fr": "/fr"}
        assert options.hostnames == {"fr": "fr.example.com"}
        assert "fr-draft" in options.locales
        assert [locale.name for locale in options.nested_locales] == ["default"]
        assert options.model_dump(by_alias=True)["contextGuid"] == "g-1"

    def test_client_options_without_context(self, workflow):
        assert workflow.get_client_options("en").context_guid is None


@pytest.mark.unit
def test_from_settings():
    settings = ApplicationSettings(
        workflow=WorkflowSettings(
            locales=[{"name": "en"}, {"name": "de"}],
            default_locale="de",
            prefixes={"de": "de"},
            page_types=["landing"],
            exclude_types=["log-entry"],
        )
    )
    workflow = Workflow.from_settings(settings, make_doc_types())
    doc = {"type": "landing", "title": "Start"}

    workflow.before_save(doc)

    assert doc["slug"] == "/de/start"
    assert workflow.include_type("log-entry") is False


class _DummyDocStore:
    def __init__(self, fail_at: int = -1) -> None:
        self.calls = []
        self.fail_at = fail_at

    async def ensure_index(self, keys, options):
        if len(self.calls) == self.fail_at:
            raise RuntimeError("duplicate key")
        self.calls.append((keys, options))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_doc_indexes_in_order():
    store = _DummyDocStore()

    await ensure_doc_indexes(store)

    assert store.calls == list(DOC_INDEXES)
    assert store.calls[0][0] == {"workflowGuid": 1}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ensure_doc_indexes_stops_at_first_error():
    store = _DummyDocStore(fail_at=0)

    with pytest.raises(RuntimeError):
        await ensure_doc_indexes(store)

    assert store.calls == []
