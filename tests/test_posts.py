"""
Tests for posts endpoints.
"""
from inkwell.models.post import Post


class TestPostsEndpoints:
    """Test posts endpoints."""

    def test_create_post(self, client, auth_headers):
        """Test creating a post starts it as an unpublished draft."""
        response = client.post(
            "/api/posts",
            headers=auth_headers,
            json={"title": "My First Post", "content": "Hello"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "My First Post"
        assert data["slug"] == "my-first-post"
        assert data["status"] == "draft"
        assert data["published"] is False
        assert data["published_at"] is None

    def test_create_post_slug_deduplicated(self, client, auth_headers):
        for _ in range(2):
            response = client.post("/api/posts", headers=auth_headers, json={"title": "Same Title"})
            assert response.status_code == 201
        assert response.json()["slug"] == "same-title-2"

    def test_create_post_explicit_slug_taken(self, client, auth_headers):
        client.post("/api/posts", headers=auth_headers, json={"title": "A", "slug": "taken"})
        response = client.post("/api/posts", headers=auth_headers, json={"title": "B", "slug": "taken"})
        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_create_post_unauthenticated(self, client):
        response = client.post("/api/posts", json={"title": "Test"})
        assert response.status_code == 401

    def test_get_posts_empty(self, client, auth_headers):
        response = client.get("/api/posts", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_get_posts(self, client, auth_headers, test_post):
        response = client.get("/api/posts", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["title"] == "First draft"

    def test_get_posts_status_filter(self, client, auth_headers, test_post):
        response = client.get("/api/posts?status=published", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_get_post_not_found(self, client, auth_headers):
        response = client.get("/api/posts/99999", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_update_post(self, client, auth_headers, test_post):
        response = client.patch(
            f"/api/posts/{test_post.id}",
            headers=auth_headers,
            json={"content": "Updated content"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["content"] == "Updated content"
        assert data["title"] == "First draft"

    def test_update_cannot_publish(self, client, auth_headers, test_post):
        """Status is not part of the update schema; publishing goes through approval."""
        response = client.patch(
            f"/api/posts/{test_post.id}",
            headers=auth_headers,
            json={"status": "published"},
        )
        assert response.status_code == 200
        assert response.json()["status"] == "draft"

    def test_data_isolation(self, client, db, test_user, other_user, other_headers):
        """Test that users can only see their own posts."""
        post = Post(author_id=test_user.id, title="Private", slug="private", status="draft")
        db.add(post)
        db.commit()

        response = client.get("/api/posts", headers=other_headers)
        assert response.status_code == 200
        assert response.json() == []

        response = client.get(f"/api/posts/{post.id}", headers=other_headers)
        assert response.status_code == 404
