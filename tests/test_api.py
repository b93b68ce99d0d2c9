from datetime import date


def create_season(client, **overrides):
    payload = {
        "name": "Spring 2025",
        "start_date": "2025-03-01",
        "end_date": "2025-05-31",
        "is_active": True,
        "points_distribution": {"1": 100, "2": 80, "3": 60},
    }
    payload.update(overrides)
    response = client.post("/api/seasons", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def create_player(client, first_name, last_name="Test"):
    response = client.post(
        "/api/players", json={"first_name": first_name, "last_name": last_name}
    )
    assert response.status_code == 201
    return response.get_json()


def test_season_endpoints(client):
    season = create_season(client)

    assert client.get("/api/seasons").get_json()[0]["id"] == season["id"]
    assert client.get("/api/seasons/active").get_json()["id"] == season["id"]

    config = client.get(f"/api/seasons/{season['id']}/rating-config").get_json()
    assert config["points_distribution"] == {"1": 100, "2": 80, "3": 60}

    response = client.put(
        f"/api/seasons/{season['id']}/rating-config",
        json={"points_distribution": {"1": 10, "0": 5}},
    )
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_unknown_resources_return_404(client):
    assert client.get("/api/seasons/99").status_code == 404
    assert client.get("/api/seasons/active").status_code == 404
    assert client.get("/api/tournaments/99").status_code == 404
    assert client.get("/api/players/99").status_code == 404
    assert client.get("/api/nowhere").status_code == 404


def test_invalid_body_is_rejected(client):
    response = client.post("/api/players", json=["not", "an", "object"])
    assert response.status_code == 400
    assert response.get_json()["error"] == "Request body must be a JSON object"


def test_player_listing_is_paginated(client):
    for name in ("Ann", "Bob", "Cy"):
        create_player(client, name, last_name=name + "son")

    body = client.get("/api/players?per_page=2&page=2").get_json()
    assert body["meta"] == {"total": 3, "page": 2, "per_page": 2, "pages": 2}
    assert [p["first_name"] for p in body["data"]] == ["Cy"]


def test_full_tournament_flow(client):
    season = create_season(client)
    response = client.post(
        "/api/tournaments",
        json={"season_id": season["id"], "name": "Opening Night", "date": "2025-03-08"},
    )
    assert response.status_code == 201
    tournament = response.get_json()
    assert tournament["game_count"] == 6
    base = f"/api/tournaments/{tournament['id']}"

    scores = {"Ann": [30] * 6, "Bob": [200, 0, 0, 0, 0, 0], "Cy": [25] * 6}
    for first_name, game_scores in scores.items():
        player = create_player(client, first_name)
        application = client.post(
            f"{base}/applications", json={"player_id": player["id"]}
        ).get_json()
        approved = client.post(f"/api/applications/{application['id']}/approve")
        assert approved.status_code == 200
        participation = approved.get_json()["participation"]
        assert participation["handicap"] is None

        recorded = client.patch(
            f"{base}/participants/{participation['id']}",
            json={"game_scores": game_scores},
        )
        assert recorded.status_code == 200

    assert client.patch(f"{base}/status", json={"status": "COMPLETED"}).status_code == 409
    assert client.patch(f"{base}/status", json={"status": "ONGOING"}).status_code == 200

    completed = client.patch(f"{base}/status", json={"status": "COMPLETED"})
    assert completed.status_code == 200
    standings = [
        (p["player"]["first_name"], p["final_position"], p["rating_points_earned"])
        for p in completed.get_json()["participations"]
    ]
    assert standings == [("Bob", 1, 100), ("Ann", 2, 80), ("Cy", 3, 60)]

    again = client.patch(f"{base}/status", json={"status": "COMPLETED"})
    assert again.status_code == 409

    leaderboard = client.get(f"/api/seasons/{season['id']}/leaderboard").get_json()
    assert leaderboard["leaderboard"][0]["player_name"] == "Bob Test"
    assert leaderboard["leaderboard"][0]["total_points"] == 100
    assert client.get("/api/seasons/active/leaderboard").get_json() == leaderboard


def test_tournament_listing_filters(client):
    season = create_season(client)
    for day, name in ((date(2025, 3, 8), "First"), (date(2025, 3, 15), "Second")):
        client.post(
            "/api/tournaments",
            json={"season_id": season["id"], "name": name, "date": day.isoformat()},
        )

    body = client.get(f"/api/tournaments?season_id={season['id']}").get_json()
    assert [t["name"] for t in body["data"]] == ["Second", "First"]

    body = client.get("/api/tournaments?from_date=2025-03-10").get_json()
    assert [t["name"] for t in body["data"]] == ["Second"]

    assert client.get("/api/tournaments?status=bogus").status_code == 400


def test_security_headers(client):
    response = client.get("/api/seasons")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_player_suggestions_keep_names_intact(client):
    create_player(client, "Sean", last_name="O'Brien")
    create_player(client, "Ann", last_name="Lee")

    body = client.get("/api/players/suggestions?q=o'b").get_json()
    assert [(p["first_name"], p["last_name"]) for p in body] == [("Sean", "O'Brien")]
    assert set(body[0]) == {"id", "first_name", "last_name", "email"}

    assert len(client.get("/api/players/suggestions?limit=1").get_json()) == 1
