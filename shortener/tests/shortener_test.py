import pytest

from shortener.db.models import Url


def test_create_short_url_success(client):
    """Test successful URL shortening."""
    response = client.post(
        "/api/v1/shorten",
        json={"url": "https://example.com/test"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["url"] == "https://example.com/test"
    assert len(data["short_code"]) == 7
    assert data["short_code"].isalnum()
    assert data["short_url"] == f"http://sho.rt/{data['short_code']}"
    assert data["click_count"] == 0
    assert data["created_by"] is None


def test_submitted_url_is_stored_verbatim(client, db_session):
    """No trailing slash or other normalization is applied to the stored URL."""
    response = client.post("/api/v1/shorten", json={"url": "  https://Example.com  "})
    assert response.status_code == 201
    short_code = response.json()["short_code"]

    row = db_session.query(Url).filter(Url.shorturl == short_code).one()
    assert row.longurl == "https://Example.com"

    response = client.get(f"/{short_code}", follow_redirects=False)
    assert response.headers["location"] == "https://Example.com"


def test_resubmission_mints_new_code_by_default(client):
    url = "https://example.com/again"

    code1 = client.post("/api/v1/shorten", json={"url": url}).json()["short_code"]
    code2 = client.post("/api/v1/shorten", json={"url": url}).json()["short_code"]

    assert code1 != code2


def test_resubmission_reuses_code_when_dedupe_enabled(app, client, settings):
    app.state.settings = settings.model_copy(update={"dedupe_long_urls": True})
    url = "https://example.com/idempotent"

    response1 = client.post("/api/v1/shorten", json={"url": url})
    assert response1.status_code == 201
    response2 = client.post("/api/v1/shorten", json={"url": url})
    assert response2.status_code == 201

    assert response1.json()["short_code"] == response2.json()["short_code"]


def test_dedupe_picks_oldest_row(app, client, db_session, settings):
    url = "https://example.com/dup"
    first = client.post("/api/v1/shorten", json={"url": url}).json()["short_code"]
    client.post("/api/v1/shorten", json={"url": url})
    assert db_session.query(Url).filter(Url.longurl == url).count() == 2

    app.state.settings = settings.model_copy(update={"dedupe_long_urls": True})
    for _ in range(3):
        assert client.post("/api/v1/shorten", json={"url": url}).json()["short_code"] == first


@pytest.mark.parametrize("invalid_url", [
    "not-a-url",
    "ftp://example.com",  # Wrong protocol
    "http://",  # Missing domain
    "",
])
def test_create_short_url_invalid_url(client, db_session, invalid_url):
    """Test that invalid URL format is rejected."""
    response = client.post("/api/v1/shorten", json={"url": invalid_url})
    assert response.status_code == 422, f"Should reject: {invalid_url}"
    assert db_session.query(Url).count() == 0


def test_create_short_url_too_long(client):
    """Test that URL longer than 2048 chars is rejected."""
    long_url = "https://example.com/" + "a" * 2100
    response = client.post("/api/v1/shorten", json={"url": long_url})
    assert response.status_code == 422
    assert "at most 2048 characters" in response.text


def test_url_at_length_limit_is_accepted(client):
    url = "https://example.com/" + "a" * (2048 - len("https://example.com/"))
    assert len(url) == 2048
    response = client.post("/api/v1/shorten", json={"url": url})
    assert response.status_code == 201
    assert response.json()["url"] == url

    response = client.post("/api/v1/shorten", json={"url": url + "a"})
    assert response.status_code == 422


def test_redirect_success(client):
    """Test successful redirect."""
    create_response = client.post(
        "/api/v1/shorten",
        json={"url": "https://example.com/redirect-test"}
    )
    short_code = create_response.json()["short_code"]

    response = client.get(f"/{short_code}", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "https://example.com/redirect-test"


def test_redirect_not_found(client, db_session):
    """Unknown codes are 404 and leave every row untouched."""
    client.post("/api/v1/shorten", json={"url": "https://example.com/untouched"})

    response = client.get("/zzzz", follow_redirects=False)
    assert response.status_code == 404
    assert response.json()["detail"] == "URL not found"
    assert [row.clicks for row in db_session.query(Url).all()] == [0]


def test_redirect_rejects_malformed_code(client):
    response = client.get("/not-a-code!", follow_redirects=False)
    assert response.status_code == 404


def test_short_codes_are_case_sensitive(client):
    short_code = client.post("/api/v1/shorten", json={"url": "https://example.com/case"}).json()["short_code"]
    swapped = short_code.swapcase()
    if swapped == short_code:
        pytest.skip("generated code has no letters")

    response = client.get(f"/{swapped}", follow_redirects=False)
    assert response.status_code == 404


def test_redirect_increments_click_count(client):
    """Test that redirects increment click count."""
    create_response = client.post(
        "/api/v1/shorten",
        json={"url": "https://example.com/very/long/path"}
    )
    short_code = create_response.json()["short_code"]

    stats = client.get(f"/api/v1/stats/{short_code}").json()
    assert stats["click_count"] == 0

    client.get(f"/{short_code}", follow_redirects=False)
    stats = client.get(f"/api/v1/stats/{short_code}").json()
    assert stats["click_count"] == 1

    client.get(f"/{short_code}", follow_redirects=False)
    stats = client.get(f"/api/v1/stats/{short_code}").json()
    assert stats["click_count"] == 2


def test_stats_do_not_count_as_clicks(client):
    short_code = client.post("/api/v1/shorten", json={"url": "https://example.com/s"}).json()["short_code"]
    for _ in range(3):
        client.get(f"/api/v1/stats/{short_code}")
    assert client.get(f"/api/v1/stats/{short_code}").json()["click_count"] == 0


def test_get_url_stats_not_found(client):
    """Test getting stats for non-existent URL."""
    response = client.get("/api/v1/stats/nonexistent")
    assert response.status_code == 404


def test_all_codes_resolve_to_their_url(client, sample_urls):
    codes = {}
    for url in sample_urls:
        codes[client.post("/api/v1/shorten", json={"url": url}).json()["short_code"]] = url

    assert len(codes) == len(sample_urls)
    for short_code, url in codes.items():
        response = client.get(f"/{short_code}", follow_redirects=False)
        assert response.headers["location"] == url


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "url-shortener"}
