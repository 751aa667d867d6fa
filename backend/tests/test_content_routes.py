# Overview: Pytest coverage for hero banner content and system endpoints.

class TestHeroBanners:
    """/api/content/hero-banners"""

    def test_create_list_and_filter_active(self, client, db_session):
        response = client.post('/api/content/hero-banners', json={
            "title": "Summer Sale",
            "image_link": "https://cdn.example.com/summer.jpg",
            "tags": ["sale", " "],
            "display_order": 2,
        })
        assert response.status_code == 201
        created = response.get_json()["data"]
        assert created["is_active"] is True
        assert created["tags"] == ["sale"]

        client.post('/api/content/hero-banners', json={
            "title": "Hidden",
            "image_link": "https://cdn.example.com/hidden.jpg",
            "is_active": False,
            "display_order": 1,
        })

        everything = client.get('/api/content/hero-banners').get_json()["data"]
        assert [b["title"] for b in everything] == ["Hidden", "Summer Sale"]

        active = client.get('/api/content/hero-banners?active=true').get_json()["data"]
        assert [b["title"] for b in active] == ["Summer Sale"]

    def test_missing_image_link_is_400(self, client, db_session):
        response = client.post('/api/content/hero-banners', json={"title": "No image"})

        assert response.status_code == 400
        assert "image_link" in response.get_json()["error"]

    def test_update_and_delete(self, client, db_session):
        created = client.post('/api/content/hero-banners', json={
            "title": "Old", "image_link": "https://cdn.example.com/a.jpg",
        }).get_json()["data"]

        response = client.put(f'/api/content/hero-banners/{created["id"]}', json={"title": "New"})
        assert response.status_code == 200
        assert response.get_json()["data"]["title"] == "New"

        assert client.delete(f'/api/content/hero-banners/{created["id"]}').status_code == 200
        assert client.delete(f'/api/content/hero-banners/{created["id"]}').status_code == 404


class TestBrandHeroBanners:
    """/api/brands/<id>/hero-banners and /api/content/brand-hero-banners"""

    def test_brand_banner_lifecycle(self, client, brand):
        response = client.post(f'/api/brands/{brand.id}/hero-banners', json={
            "title": "New Season",
            "image_link": "https://cdn.example.com/season.jpg",
            "color": "#000000",
        })
        assert response.status_code == 201
        banner = response.get_json()["data"]
        assert banner["brand_id"] == brand.id

        listed = client.get(f'/api/brands/{brand.id}/hero-banners').get_json()["data"]
        assert [b["id"] for b in listed] == [banner["id"]]

        response = client.put(f'/api/content/brand-hero-banners/{banner["id"]}', json={"is_active": "off"})
        assert response.status_code == 200
        assert response.get_json()["data"]["is_active"] is False

        assert client.delete(f'/api/content/brand-hero-banners/{banner["id"]}').status_code == 200
        assert client.get(f'/api/brands/{brand.id}/hero-banners').get_json()["data"] == []

    def test_unknown_brand_is_404(self, client):
        response = client.post('/api/brands/99999/hero-banners', json={
            "title": "X", "image_link": "https://cdn.example.com/x.jpg",
        })
        assert response.status_code == 404


class TestSystemEndpoints:
    """/health and /version"""

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        body = response.get_json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"]["details"]["brands"] == 0

    def test_version(self, client):
        response = client.get('/version')

        assert response.status_code == 200
        assert response.get_json()["api_version"] == "1.0.0"

    def test_cors_header_for_known_origin(self, client):
        response = client.get('/version', headers={"Origin": "http://localhost:3000"})
        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

        response = client.get('/version', headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in response.headers
