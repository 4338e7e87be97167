import json
from datetime import datetime

import pytest
from bson import ObjectId

from devcamper.adapters.memory import InMemoryQueryExecutor
from devcamper.core.models import QueryDescriptor
from devcamper.passwords import verify_password
from devcamper.schema.resources import REVIEWS, USERS
from devcamper.seeder import import_data, main, prepare_document

BOOTCAMP_ID = "5d713995b721c3bb38c1f5d0"
USER_ID = "5c8a1d5b0190b214360dc033"


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "bootcamps.json").write_text(json.dumps([{"_id": BOOTCAMP_ID, "name": "Devworks Bootcamp"}]))
    (tmp_path / "users.json").write_text(
        json.dumps([{"_id": USER_ID, "name": "John Doe", "role": "user", "password": "123456"}])
    )
    (tmp_path / "reviews.json").write_text(
        json.dumps([{"title": "Learned a ton!", "rating": 8, "bootcamp": BOOTCAMP_ID, "user": USER_ID}])
    )
    return tmp_path


def test_prepare_document_casts_ids_and_dates():
    review = prepare_document(
        REVIEWS, {"bootcamp": BOOTCAMP_ID, "user": USER_ID, "createdAt": "2024-05-01T10:00:00"}
    )
    assert review["bootcamp"] == ObjectId(BOOTCAMP_ID)
    assert review["createdAt"] == datetime(2024, 5, 1, 10, 0)


def test_prepare_document_hashes_passwords():
    user = prepare_document(USERS, {"_id": USER_ID, "name": "John", "password": "123456"})
    assert user["_id"] == ObjectId(USER_ID)
    assert user["password"].startswith("$argon2id$")
    assert verify_password(user["password"], "123456")


def test_import_skips_missing_files(data_dir):
    store = InMemoryQueryExecutor()
    assert import_data(store, data_dir) == {"bootcamps": 1, "courses": 0, "users": 1, "reviews": 1}

    review = store.find_one(QueryDescriptor(collection="reviews"))
    assert review["user"] == ObjectId(USER_ID)


def test_main_imports_then_deletes(data_dir):
    store = InMemoryQueryExecutor()
    assert main(["-i", str(data_dir)], store=store) == 0
    assert store.count("bootcamps", {}) == 1

    assert main(["-d"], store=store) == 0
    assert store.count("bootcamps", {}) == 0
    assert store.count("reviews", {}) == 0


def test_main_reports_bad_data(tmp_path):
    (tmp_path / "bootcamps.json").write_text(json.dumps([{"_id": "not-an-id"}]))
    assert main(["-i", str(tmp_path)], store=InMemoryQueryExecutor()) == 1


def test_main_requires_an_action():
    with pytest.raises(SystemExit):
        main([])
