from bson import ObjectId

from conftest import (
    BOOTCAMP_DEVCENTRAL,
    BOOTCAMP_DEVWORKS,
    BOOTCAMP_MODERNTECH,
    COURSE_FRONT_END,
    SAMPLE_PASSWORD,
    REVIEW_JANE_DEVWORKS,
    REVIEW_JOHN_DEVWORKS,
    USER_ADMIN,
    USER_JANE,
    USER_JOHN,
    USER_PUBLISHER,
    auth_headers,
)


def test_list_bootcamps_with_courses(client):
    response = client.get("/api/v1/bootcamps", params={"select": "name", "sort": "name", "limit": "2"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert body["pagination"] == {"next": {"page": 2, "limit": 2}}
    assert [doc["name"] for doc in body["data"]] == ["Codemasters", "Devcentral Bootcamp"]
    assert [course["title"] for course in body["data"][0]["courses"]] == ["UI/UX"]


def test_list_bootcamps_bracket_filters(client):
    response = client.get("/api/v1/bootcamps?averageCost[lte]=7500&careers[in]=Mobile Development")
    assert {doc["name"] for doc in response.json()["data"]} == {"ModernTech Bootcamp", "Devcentral Bootcamp"}


def test_bad_filter_value_is_a_server_error(client):
    response = client.get("/api/v1/bootcamps?averageCost[gt]=cheap")
    assert response.status_code == 500
    assert response.json()["success"] is False
    assert "Invalid filter value" in response.json()["error"]


def test_store_operators_in_query_string_are_rejected(client):
    response = client.get("/api/v1/courses", params={"$where": "this.tuition > 0"})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Unsupported filter field: $where"}


def test_malformed_id_in_filter_is_not_found(client):
    response = client.get("/api/v1/courses", params={"bootcamp": "bad"})
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Resource not found with id of bad"}


def test_select_keeps_identity(client):
    response = client.get("/api/v1/bootcamps", params={"select": "name,-_id", "limit": 1})
    assert set(response.json()["data"][0]) == {"_id", "name", "courses"}

def test_get_bootcamp(client):
    response = client.get(f"/api/v1/bootcamps/{BOOTCAMP_DEVWORKS}")
    assert response.status_code == 200
    assert response.json()["data"]["_id"] == str(BOOTCAMP_DEVWORKS)


def test_missing_and_malformed_ids_are_not_found(client):
    for bootcamp_id in (ObjectId(), "12345"):
        response = client.get(f"/api/v1/bootcamps/{bootcamp_id}")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": f"Resource not found with id of {bootcamp_id}"}


def test_bootcamps_in_radius(client):
    # 100 miles around Boston
    response = client.get("/api/v1/bootcamps/radius/-71.06/42.36/100")
    assert response.status_code == 200
    assert {doc["name"] for doc in response.json()["data"]} == {"Devworks Bootcamp", "ModernTech Bootcamp"}


def test_radius_rejects_non_numeric_distance(client):
    response = client.get("/api/v1/bootcamps/radius/-71.06/42.36/far")
    assert response.status_code == 400
    assert "distance" in response.json()["error"]


def test_nested_courses_are_scoped_to_the_bootcamp(client):
    response = client.get(f"/api/v1/bootcamps/{BOOTCAMP_DEVWORKS}/courses", params={"sort": "tuition"})
    body = response.json()
    assert body["count"] == 2
    assert [course["tuition"] for course in body["data"]] == [8000, 10000]
    assert all(course["bootcamp"] == str(BOOTCAMP_DEVWORKS) for course in body["data"])


def test_nested_listing_of_missing_bootcamp(client):
    response = client.get(f"/api/v1/bootcamps/{ObjectId()}/reviews")
    assert response.status_code == 404


def test_list_courses_embeds_bootcamp_summary(client):
    response = client.get("/api/v1/courses", params={"tuition[gte]": "10000", "sort": "tuition"})
    body = response.json()
    assert [course["tuition"] for course in body["data"]] == [10000, 12000]
    assert set(body["data"][0]["bootcamp"]) == {"_id", "name", "description"}


def test_get_course(client):
    response = client.get(f"/api/v1/courses/{COURSE_FRONT_END}")
    assert response.json()["data"]["bootcamp"]["name"] == "Devworks Bootcamp"


def test_list_reviews_embeds_bootcamp_name(client):
    response = client.get("/api/v1/reviews", params={"rating[gte]": "8"})
    body = response.json()
    assert body["count"] == 2
    assert all(set(review["bootcamp"]) == {"_id", "name"} for review in body["data"])


def test_create_review_requires_token(client):
    response = client.post(f"/api/v1/bootcamps/{BOOTCAMP_DEVCENTRAL}/reviews", json={"title": "t", "text": "x", "rating": 5})
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Not authorized to access this route"}


def test_invalid_token_is_rejected(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401


def test_publisher_cannot_review(client):
    response = client.post(
        f"/api/v1/bootcamps/{BOOTCAMP_DEVCENTRAL}/reviews",
        json={"title": "Nice", "text": "Good", "rating": 7},
        headers=auth_headers(USER_PUBLISHER),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "User role publisher is not authorized to access this route"


def test_create_review(client):
    response = client.post(
        f"/api/v1/bootcamps/{BOOTCAMP_DEVCENTRAL}/reviews",
        json={"title": "Nice", "text": "Good mentors", "rating": 7},
        headers=auth_headers(USER_JANE),
    )
    assert response.status_code == 201
    review = response.json()["data"]
    assert review["bootcamp"] == str(BOOTCAMP_DEVCENTRAL)
    assert review["user"] == str(USER_JANE)

    listed = client.get(f"/api/v1/bootcamps/{BOOTCAMP_DEVCENTRAL}/reviews").json()
    assert [r["title"] for r in listed["data"]] == ["Nice"]


def test_second_review_of_same_bootcamp_is_rejected(client):
    response = client.post(
        f"/api/v1/bootcamps/{BOOTCAMP_DEVWORKS}/reviews",
        json={"title": "Again", "text": "Still good", "rating": 9},
        headers=auth_headers(USER_JOHN),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "User already reviewed this bootcamp before"


def test_review_validation_errors(client):
    response = client.post(
        f"/api/v1/bootcamps/{BOOTCAMP_MODERNTECH}/reviews",
        json={"title": "Bad", "rating": 11},
        headers=auth_headers(USER_JANE),
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert "for the text field" in error
    assert "for the rating field" in error


def test_update_own_review(client):
    response = client.put(
        f"/api/v1/reviews/{REVIEW_JOHN_DEVWORKS}", json={"rating": 10}, headers=auth_headers(USER_JOHN)
    )
    assert response.status_code == 200
    assert response.json()["data"]["rating"] == 10


def test_cannot_update_someone_elses_review(client):
    response = client.put(
        f"/api/v1/reviews/{REVIEW_JANE_DEVWORKS}", json={"rating": 1}, headers=auth_headers(USER_JOHN)
    )
    assert response.status_code == 403


def test_admin_deletes_any_review(client):
    response = client.delete(f"/api/v1/reviews/{REVIEW_JANE_DEVWORKS}", headers=auth_headers(USER_ADMIN))
    assert response.json() == {"success": True, "data": {}}
    assert client.get(f"/api/v1/reviews/{REVIEW_JANE_DEVWORKS}").status_code == 404


def test_delete_missing_review(client):
    response = client.delete(f"/api/v1/reviews/{ObjectId()}", headers=auth_headers(USER_ADMIN))
    assert response.status_code == 404


def test_me(client):
    response = client.get("/api/v1/auth/me", headers=auth_headers(USER_JOHN))
    user = response.json()["data"]
    assert user["email"] == "john@gmail.com"
    assert "password" not in user


def test_token_of_deleted_user(client):
    headers = auth_headers(USER_JANE)
    client.delete(f"/api/v1/admin/users/{USER_JANE}", headers=auth_headers(USER_ADMIN))
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_admin_users_require_admin(client):
    response = client.get("/api/v1/admin/users", headers=auth_headers(USER_JOHN))
    assert response.status_code == 403


def test_admin_lists_users_without_passwords(client):
    response = client.get("/api/v1/admin/users", params={"role": "user"}, headers=auth_headers(USER_ADMIN))
    body = response.json()
    assert body["count"] == 2
    assert all("password" not in user for user in body["data"])


def test_admin_updates_user(client):
    response = client.put(
        f"/api/v1/admin/users/{USER_JOHN}", json={"name": "Johnny"}, headers=auth_headers(USER_ADMIN)
    )
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Johnny"
    assert "password" not in response.json()["data"]


def test_unknown_route(client):
    response = client.get("/api/v1/instructors")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


NEW_BOOTCAMP = {
    "name": "Codecamp North",
    "description": "Evening web development classes",
    "address": "220 Pawtucket St, Lowell, MA 01854",
    "careers": ["Web Development", "Business"],
    "website": "https://codecampnorth.com",
    "location": {"coordinates": [-71.324, 42.645], "city": "Lowell"},
}

NEW_COURSE = {
    "title": "Node.js Essentials",
    "description": "Server side JavaScript",
    "weeks": "8",
    "tuition": 5000,
    "minimumSkill": "beginner",
}


def test_publisher_creates_bootcamp(client):
    response = client.post("/api/v1/bootcamps", json=NEW_BOOTCAMP, headers=auth_headers(USER_PUBLISHER))
    assert response.status_code == 201
    bootcamp = response.json()["data"]
    assert bootcamp["slug"] == "codecamp-north"
    assert bootcamp["user"] == str(USER_PUBLISHER)
    assert bootcamp["housing"] is False
    assert client.get(f"/api/v1/bootcamps/{bootcamp['_id']}").json()["data"]["name"] == "Codecamp North"


def test_users_cannot_create_bootcamps(client):
    response = client.post("/api/v1/bootcamps", json=NEW_BOOTCAMP, headers=auth_headers(USER_JOHN))
    assert response.status_code == 403


def test_bootcamp_name_is_unique(client):
    response = client.post(
        "/api/v1/bootcamps", json={**NEW_BOOTCAMP, "name": "Codemasters"}, headers=auth_headers(USER_ADMIN)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Duplicate field value entered for name"


def test_bootcamp_validation_errors(client):
    response = client.post(
        "/api/v1/bootcamps",
        json={**NEW_BOOTCAMP, "name": "x" * 51, "careers": ["Cooking"]},
        headers=auth_headers(USER_PUBLISHER),
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert "for the name field" in error
    assert "for the careers.0 field" in error


def test_update_bootcamp_renames_slug(client):
    response = client.put(
        f"/api/v1/bootcamps/{BOOTCAMP_DEVWORKS}",
        json={"name": "Devworks Academy", "jobGuarantee": True},
        headers=auth_headers(USER_PUBLISHER),
    )
    assert response.status_code == 200
    bootcamp = response.json()["data"]
    assert bootcamp["slug"] == "devworks-academy"
    assert bootcamp["jobGuarantee"] is True
    assert bootcamp["averageCost"] == 10000


def test_update_bootcamp_location(client):
    response = client.put(
        f"/api/v1/bootcamps/{BOOTCAMP_DEVWORKS}",
        json={"location": {"coordinates": [-71.06, 42.36], "city": "Boston"}},
        headers=auth_headers(USER_ADMIN),
    )
    assert response.json()["data"]["location"] == {"type": "Point", "coordinates": [-71.06, 42.36], "city": "Boston"}

def test_only_owner_or_admin_updates_bootcamp(client):
    headers = auth_headers(USER_PUBLISHER)
    other = client.post(
        "/api/v1/admin/users",
        json={"name": "Other Publisher", "email": "other@gmail.com", "password": "123456", "role": "publisher"},
        headers=auth_headers(USER_ADMIN),
    ).json()["data"]

    response = client.put(
        f"/api/v1/bootcamps/{BOOTCAMP_DEVWORKS}", json={"housing": False}, headers=auth_headers(other["_id"])
    )
    assert response.status_code == 403
    assert response.json()["error"] == f"User {other['_id']} is not authorized to modify this bootcamp"

    assert client.put(
        f"/api/v1/bootcamps/{BOOTCAMP_DEVWORKS}", json={"housing": False}, headers=headers
    ).status_code == 200


def test_update_missing_bootcamp(client):
    response = client.put(f"/api/v1/bootcamps/{ObjectId()}", json={"housing": True}, headers=auth_headers(USER_ADMIN))
    assert response.status_code == 404


def test_delete_bootcamp_removes_its_courses_and_reviews(client):
    response = client.delete(f"/api/v1/bootcamps/{BOOTCAMP_DEVWORKS}", headers=auth_headers(USER_PUBLISHER))
    assert response.json() == {"success": True, "data": {}}
    assert client.get(f"/api/v1/bootcamps/{BOOTCAMP_DEVWORKS}").status_code == 404
    assert client.get(f"/api/v1/courses/{COURSE_FRONT_END}").status_code == 404
    assert client.get(f"/api/v1/reviews/{REVIEW_JOHN_DEVWORKS}").status_code == 404
    assert client.get("/api/v1/courses").json()["count"] == 3


def test_create_course_under_bootcamp(client):
    response = client.post(
        f"/api/v1/bootcamps/{BOOTCAMP_DEVCENTRAL}/courses", json=NEW_COURSE, headers=auth_headers(USER_PUBLISHER)
    )
    assert response.status_code == 201
    course = response.json()["data"]
    assert course["bootcamp"] == str(BOOTCAMP_DEVCENTRAL)
    assert course["scholarshipAvailable"] is False

    listed = client.get(f"/api/v1/bootcamps/{BOOTCAMP_DEVCENTRAL}/courses").json()
    assert {doc["title"] for doc in listed["data"]} == {"Mobile Development", "Node.js Essentials"}


def test_create_course_for_missing_bootcamp(client):
    missing = ObjectId()
    response = client.post(
        f"/api/v1/bootcamps/{missing}/courses", json=NEW_COURSE, headers=auth_headers(USER_ADMIN)
    )
    assert response.status_code == 404
    assert response.json()["error"] == f"Resource not found with id of {missing}"


def test_course_minimum_skill_is_validated(client):
    response = client.post(
        f"/api/v1/bootcamps/{BOOTCAMP_DEVCENTRAL}/courses",
        json={**NEW_COURSE, "minimumSkill": "expert"},
        headers=auth_headers(USER_PUBLISHER),
    )
    assert response.status_code == 400
    assert "for the minimumSkill field" in response.json()["error"]


def test_update_course(client):
    response = client.put(
        f"/api/v1/courses/{COURSE_FRONT_END}", json={"tuition": 8500}, headers=auth_headers(USER_PUBLISHER)
    )
    assert response.status_code == 200
    assert response.json()["data"]["tuition"] == 8500
    assert response.json()["data"]["title"] == "Front End Web Development"


def test_update_missing_course(client):
    response = client.put(f"/api/v1/courses/{ObjectId()}", json={"tuition": 1}, headers=auth_headers(USER_ADMIN))
    assert response.status_code == 404


def test_users_cannot_change_courses(client):
    response = client.delete(f"/api/v1/courses/{COURSE_FRONT_END}", headers=auth_headers(USER_JOHN))
    assert response.status_code == 403


def test_delete_course(client):
    response = client.delete(f"/api/v1/courses/{COURSE_FRONT_END}", headers=auth_headers(USER_ADMIN))
    assert response.json() == {"success": True, "data": {}}
    assert client.get(f"/api/v1/courses/{COURSE_FRONT_END}").status_code == 404


def test_admin_creates_user(client):
    response = client.post(
        "/api/v1/admin/users",
        json={"name": "Mary Smith", "email": "Mary@Gmail.com", "password": "secret1"},
        headers=auth_headers(USER_ADMIN),
    )
    assert response.status_code == 201
    user = response.json()["data"]
    assert user["email"] == "mary@gmail.com"
    assert user["role"] == "user"
    assert "password" not in user


def test_admin_create_user_rejects_duplicate_email(client):
    response = client.post(
        "/api/v1/admin/users",
        json={"name": "John Again", "email": "john@gmail.com", "password": "secret1"},
        headers=auth_headers(USER_ADMIN),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Duplicate field value entered for email"


def test_admin_create_user_requires_admin(client):
    response = client.post(
        "/api/v1/admin/users",
        json={"name": "Mary Smith", "email": "mary@gmail.com", "password": "secret1"},
        headers=auth_headers(USER_PUBLISHER),
    )
    assert response.status_code == 403


def test_register_then_login(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "Sam Lee", "email": "sam@gmail.com", "password": "letmein", "role": "publisher"},
    )
    assert response.status_code == 200
    token = response.json()["token"]
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}).json()["data"]
    assert me["role"] == "publisher"

    response = client.post("/api/v1/auth/login", json={"email": "sam@gmail.com", "password": "letmein"})
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_register_cannot_claim_admin(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"name": "Eve", "email": "eve@gmail.com", "password": "123456", "role": "admin"},
    )
    assert response.status_code == 400
    assert "for the role field" in response.json()["error"]


def test_register_short_password(client):
    response = client.post(
        "/api/v1/auth/register", json={"name": "Eve", "email": "eve@gmail.com", "password": "123"}
    )
    assert response.status_code == 400
    assert "for the password field" in response.json()["error"]


def test_login_with_seeded_account(client):
    response = client.post("/api/v1/auth/login", json={"email": "JOHN@gmail.com", "password": SAMPLE_PASSWORD})
    token = response.json()["token"]
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}).json()["data"]
    assert me["_id"] == str(USER_JOHN)


def test_login_rejects_bad_credentials(client):
    for credentials in (
        {"email": "john@gmail.com", "password": "wrong-password"},
        {"email": "nobody@gmail.com", "password": SAMPLE_PASSWORD},
    ):
        response = client.post("/api/v1/auth/login", json=credentials)
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}
