"""
Article endpoint tests — CRUD, the publish toggle, category joins and the
anonymous public feed.

Each test creates the categories and articles it needs via the API, so
test order does not matter.
"""
import pytest
from httpx import AsyncClient


def _article(slug: str, **extra) -> dict:
    payload = {
        "title_zh": "标题",
        "title_en": f"Title {slug}",
        "content_zh": "内容",
        "content_en": "Content",
        "slug": slug,
    }
    payload.update(extra)
    return payload


async def _create_category(client: AsyncClient, headers: dict, slug: str = "tech", name_en: str = "Tech") -> dict:
    resp = await client.post("/api/v1/categories", headers=headers, json={
        "name_zh": "技术", "name_en": name_en, "slug": slug,
    })
    return resp.json()


async def _create_article(client: AsyncClient, headers: dict, slug: str, **extra) -> dict:
    resp = await client.post("/api/v1/articles", headers=headers, json=_article(slug, **extra))
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Create + get
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_article_is_draft_by_default(async_client: AsyncClient, auth_headers, admin_user):
    article = await _create_article(async_client, auth_headers, "hello-world")
    assert article["is_published"] is False
    assert article["published_at"] is None
    assert article["author_id"] == admin_user.id
    assert article["category_id"] is None
    assert article["category_name_en"] is None


@pytest.mark.asyncio
async def test_create_published_article_stamps_published_at(async_client: AsyncClient, auth_headers):
    article = await _create_article(async_client, auth_headers, "live", is_published=True)
    assert article["is_published"] is True
    assert article["published_at"] is not None


@pytest.mark.asyncio
async def test_create_article_with_category_carries_names(async_client: AsyncClient, auth_headers):
    category = await _create_category(async_client, auth_headers)
    article = await _create_article(async_client, auth_headers, "with-cat", category_id=category["id"])
    assert article["category_id"] == category["id"]
    assert article["category_name_zh"] == "技术"
    assert article["category_name_en"] == "Tech"

    fetched = (await async_client.get(f"/api/v1/articles/{article['id']}", headers=auth_headers)).json()
    assert fetched["category_name_en"] == "Tech"


@pytest.mark.asyncio
async def test_create_article_unknown_category_returns_404(async_client: AsyncClient, auth_headers):
    resp = await async_client.post(
        "/api/v1/articles", headers=auth_headers, json=_article("orphan", category_id="missing")
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Category not found"


@pytest.mark.asyncio
async def test_create_article_bad_slug_returns_400(async_client: AsyncClient, auth_headers):
    resp = await async_client.post("/api/v1/articles", headers=auth_headers, json=_article("Bad_Slug"))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_create_article_duplicate_slug_returns_409(async_client: AsyncClient, auth_headers):
    await _create_article(async_client, auth_headers, "dupe")
    resp = await async_client.post("/api/v1/articles", headers=auth_headers, json=_article("dupe"))
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_article_missing_title_returns_422(async_client: AsyncClient, auth_headers):
    payload = _article("no-title")
    del payload["title_en"]
    resp = await async_client.post("/api/v1/articles", headers=auth_headers, json=payload)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_get_article_not_found(async_client: AsyncClient, auth_headers):
    resp = await async_client.get("/api/v1/articles/missing", headers=auth_headers)
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Update / delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_article_partial(async_client: AsyncClient, auth_headers):
    article = await _create_article(async_client, auth_headers, "partial", meta_title_en="SEO title")
    resp = await async_client.patch(f"/api/v1/articles/{article['id']}", headers=auth_headers, json={
        "title_en": "Updated",
        "meta_title_en": "",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["title_en"] == "Updated"
    assert data["title_zh"] == "标题"
    assert data["meta_title_en"] is None
    assert data["slug"] == "partial"


@pytest.mark.asyncio
async def test_update_article_moves_category(async_client: AsyncClient, auth_headers):
    tech = await _create_category(async_client, auth_headers, "tech", "Tech")
    life = await _create_category(async_client, auth_headers, "life", "Life")
    article = await _create_article(async_client, auth_headers, "mover", category_id=tech["id"])

    resp = await async_client.patch(
        f"/api/v1/articles/{article['id']}", headers=auth_headers, json={"category_id": life["id"]}
    )
    assert resp.json()["category_name_en"] == "Life"

    resp = await async_client.patch(
        f"/api/v1/articles/{article['id']}", headers=auth_headers, json={"category_id": ""}
    )
    assert resp.json()["category_id"] is None
    assert resp.json()["category_name_en"] is None


@pytest.mark.asyncio
async def test_update_article_publish_flag_sets_timestamp(async_client: AsyncClient, auth_headers):
    article = await _create_article(async_client, auth_headers, "flagged")
    resp = await async_client.patch(
        f"/api/v1/articles/{article['id']}", headers=auth_headers, json={"is_published": True}
    )
    assert resp.json()["is_published"] is True
    assert resp.json()["published_at"] is not None


@pytest.mark.asyncio
async def test_delete_article(async_client: AsyncClient, auth_headers):
    article = await _create_article(async_client, auth_headers, "bye")
    resp = await async_client.delete(f"/api/v1/articles/{article['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert (await async_client.get(f"/api/v1/articles/{article['id']}", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_deleting_category_keeps_articles(async_client: AsyncClient, auth_headers):
    category = await _create_category(async_client, auth_headers)
    article = await _create_article(async_client, auth_headers, "survivor", category_id=category["id"])

    await async_client.delete(f"/api/v1/categories/{category['id']}", headers=auth_headers)

    resp = await async_client.get(f"/api/v1/articles/{article['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["category_id"] is None


# ---------------------------------------------------------------------------
# Publish toggle
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_publish_toggle_sets_and_clears_published_at(async_client: AsyncClient, auth_headers):
    article = await _create_article(async_client, auth_headers, "toggle-me")

    published = (await async_client.post(f"/api/v1/articles/{article['id']}/publish", headers=auth_headers)).json()
    assert published["is_published"] is True
    assert published["published_at"] is not None

    drafted = (await async_client.post(f"/api/v1/articles/{article['id']}/publish", headers=auth_headers)).json()
    assert drafted["is_published"] is False
    assert drafted["published_at"] is None


# ---------------------------------------------------------------------------
# Admin list filters
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_articles_filters(async_client: AsyncClient, auth_headers):
    category = await _create_category(async_client, auth_headers)
    await _create_article(async_client, auth_headers, "a-draft")
    await _create_article(async_client, auth_headers, "a-live", is_published=True, category_id=category["id"])

    everything = (await async_client.get("/api/v1/articles", headers=auth_headers)).json()
    drafts = (await async_client.get(
        "/api/v1/articles", headers=auth_headers, params={"is_published": "false"}
    )).json()
    in_category = (await async_client.get(
        "/api/v1/articles", headers=auth_headers, params={"category_id": category["id"]}
    )).json()
    searched = (await async_client.get(
        "/api/v1/articles", headers=auth_headers, params={"search": "A-LIVE"}
    )).json()

    assert everything["total"] == 2
    assert [a["slug"] for a in drafts["items"]] == ["a-draft"]
    assert [a["slug"] for a in in_category["items"]] == ["a-live"]
    assert [a["slug"] for a in searched["items"]] == ["a-live"]


# ---------------------------------------------------------------------------
# Public feed
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_public_feed_needs_no_token_and_hides_drafts(async_client: AsyncClient, auth_headers):
    category = await _create_category(async_client, auth_headers)
    await _create_article(async_client, auth_headers, "draft-post")
    await _create_article(async_client, auth_headers, "public-post", is_published=True, category_id=category["id"])

    resp = await async_client.get("/api/v1/public/articles")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["slug"] == "public-post"
    assert data["items"][0]["category_name_en"] == "Tech"


@pytest.mark.asyncio
async def test_public_article_by_slug(async_client: AsyncClient, auth_headers):
    await _create_article(async_client, auth_headers, "read-me", is_published=True)
    resp = await async_client.get("/api/v1/public/articles/read-me")
    assert resp.status_code == 200
    assert resp.json()["slug"] == "read-me"


@pytest.mark.asyncio
async def test_public_article_by_slug_hides_drafts(async_client: AsyncClient, auth_headers):
    await _create_article(async_client, auth_headers, "secret-draft")
    resp = await async_client.get("/api/v1/public/articles/secret-draft")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_article_routes_require_token(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/articles", json=_article("anon"))
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_draft_enters_public_feed_once_published(async_client: AsyncClient, auth_headers):
    category = await _create_category(async_client, auth_headers, "tech", "Tech")
    article = await _create_article(
        async_client, auth_headers, "scenario", category_id=category["id"], is_published=False
    )

    before = (await async_client.get("/api/v1/public/articles")).json()
    assert before["total"] == 0

    await async_client.post(f"/api/v1/articles/{article['id']}/publish", headers=auth_headers)

    after = (await async_client.get("/api/v1/public/articles")).json()
    assert [a["id"] for a in after["items"]] == [article["id"]]
    assert after["items"][0]["category_name_en"] == "Tech"


@pytest.mark.asyncio
async def test_fetch_returns_what_was_created(async_client: AsyncClient, auth_headers):
    payload = _article(
        "round-trip",
        meta_title_zh="元标题",
        meta_description_en="Description",
        meta_keywords_en="a,b",
        og_image="https://example.com/og.png",
    )
    created = (await async_client.post("/api/v1/articles", headers=auth_headers, json=payload)).json()
    fetched = (await async_client.get(f"/api/v1/articles/{created['id']}", headers=auth_headers)).json()

    for field, value in payload.items():
        assert fetched[field] == value


@pytest.mark.asyncio
async def test_create_article_blank_title_returns_400(async_client: AsyncClient, auth_headers):
    resp = await async_client.post("/api/v1/articles", headers=auth_headers, json=_article("blank", title_en=""))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Title, content, and slug are required"
