"""
Unit tests for the page slug prefix failsafe
"""

import pytest

from locale_workflow.services.doc_types import DocTypeRegistry, TypeManager
from locale_workflow.services.locale_topology import compose_locales
from locale_workflow.services.prefix_registry import build_prefix_registry
from locale_workflow.services.slug_prefixer import SlugPrefixer


@pytest.fixture
def prefixer():
    topology = compose_locales([{"name": "en"}, {"name": "fr"}, {"name": "de"}])
    registry = build_prefix_registry(topology, {"en": "/en", "fr": "/fr"})
    doc_types = DocTypeRegistry(doc_types=[TypeManager(name="home", is_page=True)])
    return SlugPrefixer(registry, doc_types.is_page)


@pytest.mark.unit
class TestApplyPrefix:
    def test_prefixes_unprefixed_page(self, prefixer):
        doc = {"type": "page", "slug": "/about", "workflowLocale": "en-draft"}

        prefixer.apply_prefix(doc)

        assert doc["slug"] == "/en/about"
        assert doc["workflowLocaleForPathIndex"] == "en-draft"

    def test_is_idempotent(self, prefixer):
        doc = {"type": "page", "slug": "/about", "workflowLocale": "en"}

        prefixer.apply_prefix(doc)
        prefixer.apply_prefix(doc)

        assert doc["slug"] == "/en/about"

    def test_correct_prefix_is_left_alone(self, prefixer):
        doc = {"type": "page", "slug": "/fr/contact", "workflowLocale": "fr"}

        prefixer.apply_prefix(doc)

        assert doc["slug"] == "/fr/contact"

    def test_other_first_segment_is_kept_behind_prefix(self, prefixer):
        doc = {"type": "page", "slug": "/fr/contact", "workflowLocale": "en"}

        prefixer.apply_prefix(doc)

        assert doc["slug"] == "/en/fr/contact"

    def test_page_without_slug_gets_slug_from_title(self, prefixer):
        doc = {"type": "home", "title": "Hello World!", "workflowLocale": "fr-draft"}

        prefixer.apply_prefix(doc)

        assert doc["slug"] == "/fr/hello-world"

    def test_root_slug_gets_prefix(self, prefixer):
        doc = {"type": "home", "slug": "/", "title": "Home", "workflowLocale": "en"}

        prefixer.apply_prefix(doc)

        assert doc["slug"] == "/en/"

    def test_locale_without_prefix_is_ignored(self, prefixer):
        doc = {"type": "page", "slug": "/about", "workflowLocale": "de"}

        prefixer.apply_prefix(doc)

        assert doc["slug"] == "/about"

    def test_doc_without_locale_is_ignored(self, prefixer):
        doc = {"type": "page", "slug": "/about"}

        prefixer.apply_prefix(doc)

        assert doc["slug"] == "/about"

    def test_pieces_are_ignored(self, prefixer):
        doc = {"type": "article", "slug": "my-article", "workflowLocale": "en"}

        prefixer.apply_prefix(doc)

        assert doc["slug"] == "my-article"
