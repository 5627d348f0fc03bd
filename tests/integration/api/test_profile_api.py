"""Integration tests for the Profile API."""

import pytest
from httpx import AsyncClient

from tests.conftest import RegisterFn

PROFILE_FORM = {
    "handle": "alice",
    "status": "Developer",
    "skills": "python, sql, go",
    "website": "https://alice.dev",
    "twitter": "https://twitter.com/alice",
}

EXPERIENCE_FORM = {
    "title": "Engineer",
    "company": "Acme",
    "from": "2019-05-01",
    "to": "2020-06-30",
}

EDUCATION_FORM = {
    "school": "MIT",
    "degree": "MSc",
    "fieldofstudy": "Computer Science",
    "from": "2015-09-01",
    "current": True,
}

OBJECT_ID = "5c8a1d5b0190b214360dc031"


class TestProfileCreateAndRead:
    @pytest.mark.asyncio
    async def test_get_own_profile_before_creating(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, _ = await register_user()

        response = await client.get("/api/profile", headers=headers)

        assert response.status_code == 404
        assert response.json()["details"] == {"noprofile": "There is no profile for this user"}

    @pytest.mark.asyncio
    async def test_create_then_read_with_owner_joined(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, user_id = await register_user()

        created = await client.post("/api/profile", json=PROFILE_FORM, headers=headers)
        assert created.status_code == 200
        assert created.json()["skills"] == ["python", "sql", "go"]
        assert created.json()["social"]["twitter"] == "https://twitter.com/alice"

        response = await client.get("/api/profile", headers=headers)

        data = response.json()
        assert data["handle"] == "alice"
        assert data["user"]["id"] == user_id
        assert data["user"]["name"] == "Alice Smith"
        assert data["user"]["avatar"].startswith("https://www.gravatar.com/avatar/")

    @pytest.mark.asyncio
    async def test_public_lookups(self, client: AsyncClient, register_user: RegisterFn):
        headers, user_id = await register_user()
        await client.post("/api/profile", json=PROFILE_FORM, headers=headers)

        by_handle = await client.get("/api/profile/handle/alice")
        by_user = await client.get(f"/api/profile/user/{user_id}")
        everyone = await client.get("/api/profile/all")

        assert by_handle.status_code == 200
        assert by_user.json()["id"] == by_handle.json()["id"]
        assert [p["handle"] for p in everyone.json()] == ["alice"]

    @pytest.mark.asyncio
    async def test_all_profiles_empty(self, client: AsyncClient):
        response = await client.get("/api/profile/all")

        assert response.status_code == 404
        assert response.json()["details"] == {"noprofile": "There are no profiles"}

    @pytest.mark.asyncio
    async def test_unknown_handle(self, client: AsyncClient):
        response = await client.get("/api/profile/handle/nobody")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_user_lookup_with_non_uuid_id(self, client: AsyncClient):
        response = await client.get(f"/api/profile/user/{OBJECT_ID}")

        assert response.status_code == 404
        assert response.json()["noprofile"] == "There is no profile for this user"

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient):
        response = await client.post("/api/profile", json=PROFILE_FORM)

        assert response.status_code == 401


class TestProfileUpdate:
    @pytest.mark.asyncio
    async def test_update_changes_only_sent_fields(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, _ = await register_user()
        first = await client.post(
            "/api/profile", json={**PROFILE_FORM, "bio": "Hello"}, headers=headers
        )

        response = await client.post(
            "/api/profile",
            json={"handle": "alice", "status": "Lead", "skills": "rust"},
            headers=headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == first.json()["id"]
        assert data["status"] == "Lead"
        assert data["skills"] == ["rust"]
        assert data["bio"] == "Hello"
        assert data["website"] == "https://alice.dev"

    @pytest.mark.asyncio
    async def test_handle_taken_by_other_user(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        alice, _ = await register_user()
        bob, _ = await register_user(name="Bob Jones", email="bob@example.com")
        await client.post("/api/profile", json=PROFILE_FORM, headers=alice)

        response = await client.post("/api/profile", json=PROFILE_FORM, headers=bob)

        assert response.status_code == 400
        assert response.json()["details"] == {"handle": "That handle already exists"}

    @pytest.mark.asyncio
    async def test_invalid_url(self, client: AsyncClient, register_user: RegisterFn):
        headers, _ = await register_user()

        response = await client.post(
            "/api/profile", json={**PROFILE_FORM, "website": "nope"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"website": "Not a valid URL"}

    @pytest.mark.asyncio
    async def test_padded_fields_are_stored_trimmed(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, _ = await register_user()

        created = await client.post(
            "/api/profile",
            json={
                **PROFILE_FORM,
                "handle": " alice ",
                "company": "  Acme",
                "twitter": " https://twitter.com/alice ",
            },
            headers=headers,
        )
        response = await client.get("/api/profile/handle/alice")

        assert created.status_code == 200
        assert response.status_code == 200
        data = response.json()
        assert data["handle"] == "alice"
        assert data["company"] == "Acme"
        assert data["social"]["twitter"] == "https://twitter.com/alice"

    @pytest.mark.asyncio
    async def test_deleted_account_token_cannot_create_profile(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, _ = await register_user()
        assert (await client.delete("/api/profile", headers=headers)).status_code == 200

        response = await client.post("/api/profile", json=PROFILE_FORM, headers=headers)

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"
        assert (await client.get("/api/profile/all")).status_code == 404


class TestExperienceAndEducation:
    @pytest.mark.asyncio
    async def test_add_and_remove_experience(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, _ = await register_user()
        await client.post("/api/profile", json=PROFILE_FORM, headers=headers)

        await client.post("/api/profile/experience", json=EXPERIENCE_FORM, headers=headers)
        added = await client.post(
            "/api/profile/experience",
            json={**EXPERIENCE_FORM, "title": "Senior Engineer", "from": "2020-07-01"},
            headers=headers,
        )

        experience = added.json()["experience"]
        assert [e["title"] for e in experience] == ["Senior Engineer", "Engineer"]
        assert experience[1]["from"] == "2019-05-01"
        assert experience[1]["to"] == "2020-06-30"

        removed = await client.delete(
            f"/api/profile/experience/{experience[0]['id']}", headers=headers
        )

        assert removed.status_code == 200
        assert [e["title"] for e in removed.json()["experience"]] == ["Engineer"]

    @pytest.mark.asyncio
    async def test_remove_unknown_experience_is_noop(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, _ = await register_user()
        await client.post("/api/profile", json=PROFILE_FORM, headers=headers)
        await client.post("/api/profile/experience", json=EXPERIENCE_FORM, headers=headers)

        response = await client.delete(
            "/api/profile/experience/00000000-0000-0000-0000-000000000000", headers=headers
        )

        assert response.status_code == 200
        assert len(response.json()["experience"]) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("section", ["experience", "education"])
    async def test_remove_with_non_uuid_id_is_noop(
        self, client: AsyncClient, register_user: RegisterFn, section: str
    ):
        headers, _ = await register_user()
        await client.post("/api/profile", json=PROFILE_FORM, headers=headers)
        await client.post("/api/profile/experience", json=EXPERIENCE_FORM, headers=headers)
        await client.post("/api/profile/education", json=EDUCATION_FORM, headers=headers)

        response = await client.delete(f"/api/profile/{section}/{OBJECT_ID}", headers=headers)

        assert response.status_code == 200
        assert len(response.json()["experience"]) == 1
        assert len(response.json()["education"]) == 1

    @pytest.mark.asyncio
    async def test_add_current_education(self, client: AsyncClient, register_user: RegisterFn):
        headers, _ = await register_user()
        await client.post("/api/profile", json=PROFILE_FORM, headers=headers)

        response = await client.post(
            "/api/profile/education", json=EDUCATION_FORM, headers=headers
        )

        entry = response.json()["education"][0]
        assert entry["school"] == "MIT"
        assert entry["current"] is True
        assert entry["to"] is None

    @pytest.mark.asyncio
    async def test_experience_requires_fields(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, _ = await register_user()
        await client.post("/api/profile", json=PROFILE_FORM, headers=headers)

        response = await client.post("/api/profile/experience", json={}, headers=headers)

        assert response.status_code == 400
        assert set(response.json()["details"]) == {"title", "company", "from"}

    @pytest.mark.asyncio
    async def test_experience_without_profile(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, _ = await register_user()

        response = await client.post(
            "/api/profile/experience", json=EXPERIENCE_FORM, headers=headers
        )

        assert response.status_code == 404


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_delete_removes_user_profile_and_posts(
        self, client: AsyncClient, register_user: RegisterFn
    ):
        headers, user_id = await register_user()
        await client.post("/api/profile", json=PROFILE_FORM, headers=headers)
        await client.post("/api/posts", json={"text": "Soon to be gone post"}, headers=headers)

        response = await client.delete("/api/profile", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert (await client.get(f"/api/profile/user/{user_id}")).status_code == 404
        assert (await client.get("/api/posts")).json() == []
        assert (await client.get("/api/users/current", headers=headers)).status_code == 401
        login = await client.post(
            "/api/users/login", json={"email": "alice@example.com", "password": "secret123"}
        )
        assert login.status_code == 404
