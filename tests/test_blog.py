"""
Tests for the blog: slugs, table of contents and ownership.
"""
from datetime import datetime

import pytest

from prospectflow.db.models.post import Post
from prospectflow.services.blog_service import slugify, extract_toc

CONTENT = """Intro paragraph for the post.

## Getting Started
Some text.

### Step 1: Install
```
## not a heading inside code
```

#### Deep Dive ##
# Top-level headings are skipped
"""


def _create(client, headers, **payload):
    payload.setdefault("content", CONTENT)
    response = client.post("/blog/posts", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.parametrize("title,expected", [
    ("Hello, World! 2026", "hello-world-2026"),
    ("  --Cold Emails: A Guide--  ", "cold-emails-a-guide"),
    ("Follow    up   often", "follow-up-often"),
    ("Café déjà vu", "caf-d-j-vu"),
])
def test_slugify(title, expected):
    assert slugify(title) == expected


def test_extract_toc():
    toc = extract_toc(CONTENT)
    assert [(item.id, item.level, item.text) for item in toc] == [
        ("getting-started", 2, "Getting Started"),
        ("step-1-install", 3, "Step 1: Install"),
        ("deep-dive", 4, "Deep Dive"),
    ]


def test_create_post_derives_slug_and_publishes(client, auth_headers):
    post = _create(client, auth_headers, title="How to Follow Up", excerpt="A short guide")

    assert post["slug"] == "how-to-follow-up"
    assert post["status"] == "published"
    assert post["published_at"] is not None
    assert post["author_name_cache"] == "Olivia Owner"
    assert [item["id"] for item in post["toc"]] == ["getting-started", "step-1-install", "deep-dive"]


@pytest.mark.parametrize("slug", ["ab", "Has-Caps", "double--hyphen", "-leading", "trailing-", "with space"])
def test_invalid_slug_rejected(client, auth_headers, slug):
    response = client.post(
        "/blog/posts",
        json={"title": "Valid title", "slug": slug, "content": CONTENT},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_short_content_and_title_rejected(client, auth_headers):
    response = client.post("/blog/posts", json={"title": "Ok title", "content": "too short"}, headers=auth_headers)
    assert response.status_code == 422
    response = client.post("/blog/posts", json={"title": "Hi", "content": CONTENT}, headers=auth_headers)
    assert response.status_code == 422


def test_title_without_slug_characters(client, auth_headers):
    response = client.post("/blog/posts", json={"title": "!!!", "content": CONTENT}, headers=auth_headers)
    assert response.status_code == 400


def test_duplicate_slug_conflicts(client, auth_headers, other_headers):
    _create(client, auth_headers, title="Cold outreach tips")
    response = client.post(
        "/blog/posts",
        json={"title": "Something else", "slug": "cold-outreach-tips", "content": CONTENT},
        headers=other_headers,
    )
    assert response.status_code == 409


def test_public_list_and_detail(client, auth_headers, db):
    older = _create(client, auth_headers, title="Older post")
    newer = _create(client, auth_headers, title="Newer post")
    featured = _create(client, auth_headers, title="Featured post", excerpt="Pinned to the top")

    db.query(Post).filter(Post.id == older["id"]).update({Post.published_at: datetime(2026, 1, 1)})
    db.query(Post).filter(Post.id == newer["id"]).update({Post.published_at: datetime(2026, 2, 1)})
    db.query(Post).filter(Post.id == featured["id"]).update(
        {Post.published_at: datetime(2025, 6, 1), Post.is_featured: True}
    )
    db.commit()

    response = client.get("/blog/posts")
    assert response.status_code == 200
    assert [p["slug"] for p in response.json()["posts"]] == ["featured-post", "newer-post", "older-post"]

    response = client.get("/blog/posts", params={"search": "pinned"})
    assert [p["slug"] for p in response.json()["posts"]] == ["featured-post"]

    response = client.get("/blog/posts", params={"search": "olivia"})
    assert response.json()["total"] == 3

    response = client.get("/blog/posts/newer-post")
    assert response.status_code == 200
    assert response.json()["toc"][0]["text"] == "Getting Started"

    assert client.get("/blog/posts/missing-post").status_code == 404


def test_drafts_are_not_public(client, auth_headers, db):
    post = _create(client, auth_headers, title="Work in progress")
    db.query(Post).filter(Post.id == post["id"]).update({Post.status: "draft"})
    db.commit()

    assert client.get("/blog/posts/work-in-progress").status_code == 404
    assert client.get("/blog/posts").json()["total"] == 0


def test_only_author_can_edit_or_delete(client, auth_headers, other_headers):
    post = _create(client, auth_headers, title="My post")

    response = client.put(f"/blog/posts/{post['id']}", json={"title": "Stolen"}, headers=other_headers)
    assert response.status_code == 403
    assert client.delete(f"/blog/posts/{post['id']}", headers=other_headers).status_code == 403

    response = client.put(
        f"/blog/posts/{post['id']}",
        json={"title": "My edited post", "slug": "my-edited-post"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["slug"] == "my-edited-post"

    assert client.delete(f"/blog/posts/{post['id']}", headers=auth_headers).status_code == 204
    assert client.get("/blog/posts/my-edited-post").status_code == 404
    assert client.delete(f"/blog/posts/{post['id']}", headers=auth_headers).status_code == 404


def test_writing_requires_login(client):
    response = client.post("/blog/posts", json={"title": "Anon post", "content": CONTENT})
    assert response.status_code == 401
