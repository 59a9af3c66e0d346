import io
import os
import random
from datetime import datetime, timedelta

import pytest

from carlens.core.errors import NotFoundError
from carlens.models import CarRecord, User
from carlens.services.cars import CarRecordStore


@pytest.fixture
def users(db):
    alice = User(email="alice@example.com", password_hash="x")
    bob = User(email="bob@example.com", password_hash="x")
    db.add_all([alice, bob])
    db.commit()
    return alice, bob


@pytest.fixture
def store(db, storage):
    return CarRecordStore(db, storage, rng=random.Random(7))


def _add(store, owner, name, info='{"make": "Toyota"}'):
    stored = store.storage.store(owner.id, io.BytesIO(b"img"), name)
    return store.create(owner.id, stored.filename, stored.url, info)


def test_create_assigns_id_and_timestamp(store, users):
    alice, _ = users

    record = _add(store, alice, "car.jpg")

    assert record.id is not None
    assert record.owner_id == alice.id
    assert record.uploaded_at is not None
    assert record.car_info == '{"make": "Toyota"}'


def test_list_by_owner_is_newest_first_and_scoped(store, users, db):
    alice, bob = users
    old = _add(store, alice, "old.jpg")
    new = _add(store, alice, "new.jpg")
    _add(store, bob, "bob.jpg")
    old.uploaded_at = datetime.utcnow() - timedelta(days=1)
    db.commit()

    listed = store.list_by_owner(alice.id)

    assert [r.id for r in listed] == [new.id, old.id]


def test_list_by_owner_without_uploads_is_empty(store, users):
    assert store.list_by_owner(users[1].id) == []


def test_pick_featured_on_empty_store(store):
    with pytest.raises(NotFoundError):
        store.pick_featured()


def test_pick_featured_covers_all_owners(store, users):
    alice, bob = users
    ids = {_add(store, alice, "a.jpg").id, _add(store, bob, "b.jpg").id, _add(store, bob, "c.jpg").id}

    picked = {store.pick_featured().id for _ in range(60)}

    assert picked == ids


def test_delete_owned_removes_row_and_file(store, users, db):
    alice, _ = users
    record = _add(store, alice, "car.jpg")
    path = store.storage.path_for(alice.id, record.filename)

    store.delete_owned(record.id, alice.id)

    assert db.query(CarRecord).count() == 0
    assert not os.path.exists(path)


def test_delete_by_other_user_is_not_found(store, users, db):
    alice, bob = users
    record = _add(store, alice, "car.jpg")
    path = store.storage.path_for(alice.id, record.filename)

    with pytest.raises(NotFoundError):
        store.delete_owned(record.id, bob.id)

    assert db.query(CarRecord).count() == 1
    assert os.path.exists(path)


def test_delete_unknown_id_is_not_found(store, users):
    with pytest.raises(NotFoundError):
        store.delete_owned(999, users[0].id)


def test_delete_succeeds_when_file_is_already_gone(store, users, db):
    alice, _ = users
    record = _add(store, alice, "car.jpg")
    os.remove(store.storage.path_for(alice.id, record.filename))

    store.delete_owned(record.id, alice.id)

    assert store.list_by_owner(alice.id) == []


@pytest.mark.parametrize("record_id", [0, -1, 2**31, 10**20])
def test_delete_with_impossible_id_is_not_found(store, users, record_id):
    with pytest.raises(NotFoundError):
        store.delete_owned(record_id, users[0].id)
