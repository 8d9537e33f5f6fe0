"""Tests for the typed content fetchers."""

import pytest

from paguro.content import policies
from paguro.content.models import ContentStatus
from paguro.content.queries import (
    BLOG_INDEX_QUERY,
    POST_BY_SLUG_QUERY,
    get_blog_posts_for_index,
    get_countries_for_destinations,
    get_countries_with_posts,
    get_gallery_items,
    get_post_by_slug,
    get_world_regions,
)
from paguro.errors import MalformedResponseError
from paguro.i18n.locale import Locale

POSTS = [
    {
        "_id": "post-live",
        "slug": "gobi",
        "status": "published",
        "titleIt": "Deserto del Gobi",
        "titleEn": "Gobi desert",
    },
    {
        "_id": "post-draft",
        "slug": "ulaanbaatar",
        "status": "draft",
        "titleIt": "Ulaanbaatar",
        "titleEn": None,
    },
    {
        "_id": "post-legacy",
        "slug": "old-trip",
        "titleIt": None,
        "titleEn": "Old trip",
    },
]


def _visible(records, preview):
    """Mimic the live visibility filter: published or status-less documents."""
    return [
        r for r in records
        if preview or r.get("status") in (None, ContentStatus.PUBLISHED.value)
    ]


def _resolve_title(record, lang):
    it, en = record.get("titleIt"), record.get("titleEn")
    return (en or it) if lang == "en" else (it or en)


def blog_responder(groq, params, preview):
    if groq == BLOG_INDEX_QUERY:
        return [
            {**r, "title": _resolve_title(r, params["lang"])}
            for r in _visible(POSTS, preview)
        ]
    if groq == POST_BY_SLUG_QUERY:
        matches = [r for r in _visible(POSTS, preview) if r["slug"] == params["slug"]]
        return matches[0] if matches else None
    return []


class TestBlogIndex:
    def test_live_excludes_drafts(self, content_client, repository):
        repository.responder = blog_responder
        posts = get_blog_posts_for_index(content_client, Locale.IT)
        assert [p.id for p in posts] == ["post-live", "post-legacy"]

    def test_preview_includes_drafts(self, content_client, repository):
        repository.responder = blog_responder
        posts = get_blog_posts_for_index(content_client, Locale.IT, preview=True)
        assert "post-draft" in [p.id for p in posts]

    def test_titles_resolved_with_fallback(self, content_client, repository):
        repository.responder = blog_responder
        posts = get_blog_posts_for_index(content_client, Locale.IT)
        titles = {p.id: p.title for p in posts}
        assert titles["post-live"] == "Deserto del Gobi"
        assert titles["post-legacy"] == "Old trip"

    def test_uses_blog_index_policy(self, content_client, repository, clock):
        get_blog_posts_for_index(content_client)
        clock.advance(policies.BLOG_INDEX.revalidate_seconds - 1)
        get_blog_posts_for_index(content_client)
        assert len(repository.calls) == 1

    def test_null_result_is_empty(self, content_client, repository):
        repository.responder = lambda groq, params, preview: None
        assert get_blog_posts_for_index(content_client) == []

    def test_malformed_payload(self, content_client, repository):
        repository.responder = lambda groq, params, preview: [{"title": "no id"}]
        with pytest.raises(MalformedResponseError):
            get_blog_posts_for_index(content_client)


class TestPostBySlug:
    def test_found(self, content_client, repository):
        repository.responder = blog_responder
        post = get_post_by_slug(content_client, "gobi", Locale.EN)
        assert post is not None
        assert post.id == "post-live"
        assert repository.calls[0][1]["slug"] == "gobi"
        assert repository.calls[0][1]["lang"] == "en"

    def test_draft_hidden_live_visible_in_preview(self, content_client, repository):
        repository.responder = blog_responder
        assert get_post_by_slug(content_client, "ulaanbaatar") is None
        draft = get_post_by_slug(content_client, "ulaanbaatar", preview=True)
        assert draft is not None
        assert draft.status is ContentStatus.DRAFT

    def test_media_items_extracted_from_body(self, content_client, repository):
        repository.responder = lambda groq, params, preview: {
            "_id": "p",
            "slug": "p",
            "content": [
                {"_type": "block", "children": []},
                {"_type": "mediaItem", "_id": "m1", "type": "image", "captionResolved": "Dune"},
            ],
        }
        post = get_post_by_slug(content_client, "p")
        media = post.media_items()
        assert len(media) == 1
        assert media[0].kind == "image"
        assert media[0].caption_resolved == "Dune"

    def test_malformed_payload(self, content_client, repository):
        repository.responder = lambda groq, params, preview: {"_id": "p"}
        with pytest.raises(MalformedResponseError):
            get_post_by_slug(content_client, "p")


class TestTaxonomyFetchers:
    def test_gallery_items(self, content_client, repository):
        repository.responder = lambda groq, params, preview: [
            {
                "_id": "g1",
                "orientation": "landscape",
                "captionResolved": "Sunset",
                "countries": [{"title": "Mongolia", "slug": "mongolia"}],
                "regions": None,
            }
        ]
        items = get_gallery_items(content_client, Locale.EN)
        assert items[0].orientation == "landscape"
        assert items[0].countries[0].slug == "mongolia"
        assert items[0].regions == []

    def test_countries_for_destinations(self, content_client, repository):
        repository.responder = lambda groq, params, preview: [
            {
                "_id": "c1",
                "name": "Mongolia",
                "slug": "mongolia",
                "postCount": 2,
                "worldRegion": {"title": "Asia", "slug": "asia", "order": 3},
                "travelStyles": [{"slug": "trekking", "label": "Trekking", "order": 1}],
            }
        ]
        countries = get_countries_for_destinations(content_client)
        assert countries[0].post_count == 2
        assert countries[0].world_region.slug == "asia"
        assert countries[0].travel_styles[0].label == "Trekking"

    def test_countries_with_posts_is_live_only(self, content_client, repository):
        repository.responder = lambda groq, params, preview: [
            {"_id": "c1", "title": "Cina", "slug": "china", "postCount": 1}
        ]
        countries = get_countries_with_posts(content_client, Locale.IT)
        assert countries[0].title == "Cina"
        assert repository.calls[0][2] is False

    def test_world_regions_cached_for_a_day(self, content_client, repository, clock):
        repository.responder = lambda groq, params, preview: [
            {"_id": "r1", "title": "Asia", "shortTitle": "Asia", "slug": "asia", "order": 1}
        ]
        get_world_regions(content_client, Locale.EN)
        clock.advance(3600)
        regions = get_world_regions(content_client, Locale.EN)
        assert regions[0].short_title == "Asia"
        assert len(repository.calls) == 1
