"""
Store / Repository 테스트
"""

import sqlite3
from datetime import timedelta, timezone, datetime

import pytest

from expiry_notifier.domain.exceptions import NotFoundError, StorageError
from expiry_notifier.infrastructure.database.schema import get_schema_version, init_db
from expiry_notifier.infrastructure.database.store import Store
from expiry_notifier.settings.constants import DB_SCHEMA_VERSION

from .conftest import FIXED_NOW


def _count_rows(db_path, table):
    conn = sqlite3.connect(str(db_path))
    try:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    finally:
        conn.close()


class TestSchema:

    def test_init_creates_tables(self, store):
        conn = sqlite3.connect(str(store.db_path))
        tables = {
            r[0] for r in conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        }
        conn.close()
        assert {"schema_version", "users", "products", "notification_log"} <= tables

    def test_init_is_idempotent(self, store):
        store.init()
        store.init()
        conn = sqlite3.connect(str(store.db_path))
        assert get_schema_version(conn) == DB_SCHEMA_VERSION
        conn.close()

    def test_unopenable_path_raises_storage_error(self, tmp_path):
        """디렉터리를 DB 파일로 지정하면 StorageError"""
        with pytest.raises(StorageError):
            init_db(tmp_path)


class TestUsers:

    def test_create_user(self, store):
        user = store.create_user("A", "a@x.com")
        assert user.id > 0
        assert user.name == "A"
        assert user.email == "a@x.com"
        assert user.products == []

    def test_ids_are_assigned_in_order(self, store):
        first = store.create_user("A", "a@x.com")
        second = store.create_user("B", "b@x.com")
        assert second.id > first.id

    def test_list_users(self, store):
        store.create_user("A", "a@x.com")
        store.create_user("B", "b@x.com")
        users = store.list_users()
        assert [u.name for u in users] == ["A", "B"]
        assert all(u.products == [] for u in users)

    def test_find_user(self, store):
        created = store.create_user("A", "a@x.com")
        found = store.find_user(created.id)
        assert found.email == "a@x.com"

    def test_find_missing_user(self, store):
        with pytest.raises(NotFoundError):
            store.find_user(999)


class TestProducts:

    def test_create_product(self, store):
        user = store.create_user("A", "a@x.com")
        product = store.create_product("Milk", FIXED_NOW + timedelta(days=2), user.id)

        assert product.id > 0
        assert product.user_id == user.id
        assert product.expiry == FIXED_NOW + timedelta(days=2)
        assert product.created_at.tzinfo is not None

    def test_expiry_is_normalized_to_utc(self, store):
        user = store.create_user("A", "a@x.com")
        kst = timezone(timedelta(hours=9))
        expiry = datetime(2025, 10, 10, 18, 0, 0, tzinfo=kst)

        store.create_product("Milk", expiry, user.id)
        product = store.list_products_for_user(user.id)[0]

        assert product.expiry == expiry
        assert product.expiry.utcoffset() == timedelta(0)

    def test_create_product_for_missing_user(self, store):
        """없는 사용자에 상품 생성 → NotFoundError, 행 생성 없음"""
        with pytest.raises(NotFoundError):
            store.create_product("Milk", FIXED_NOW, 42)
        assert _count_rows(store.db_path, "products") == 0

    def test_list_products_for_user(self, store):
        a = store.create_user("A", "a@x.com")
        b = store.create_user("B", "b@x.com")
        store.create_product("Milk", FIXED_NOW, a.id)
        store.create_product("Egg", FIXED_NOW, b.id)
        store.create_product("Rice", FIXED_NOW, a.id)

        products = store.list_products_for_user(a.id)
        assert [p.name for p in products] == ["Milk", "Rice"]

    def test_list_products_empty(self, store):
        user = store.create_user("A", "a@x.com")
        assert store.list_products_for_user(user.id) == []

    def test_list_products_for_missing_user(self, store):
        with pytest.raises(NotFoundError):
            store.list_products_for_user(999)


class TestUsersWithProducts:

    def test_products_populated_per_user(self, store):
        a = store.create_user("A", "a@x.com")
        b = store.create_user("B", "b@x.com")
        c = store.create_user("C", "c@x.com")
        store.create_product("Milk", FIXED_NOW, a.id)
        store.create_product("Egg", FIXED_NOW, c.id)
        store.create_product("Rice", FIXED_NOW, a.id)

        users = store.list_users_with_products()

        assert [u.id for u in users] == [a.id, b.id, c.id]
        assert [p.name for p in users[0].products] == ["Milk", "Rice"]
        assert users[1].products == []
        assert [p.name for p in users[2].products] == ["Egg"]

    def test_empty_store(self, store):
        assert store.list_users_with_products() == []


class TestStorageErrors:

    def test_missing_schema_raises_storage_error(self, tmp_path):
        """스키마 초기화 전 조회 → StorageError"""
        bare = Store(tmp_path / "bare.db")
        with pytest.raises(StorageError):
            bare.list_users_with_products()

    def test_storage_error_payload(self, tmp_path):
        bare = Store(tmp_path / "bare.db")
        with pytest.raises(StorageError) as exc_info:
            bare.create_user("A", "a@x.com")
        payload = exc_info.value.to_dict()
        assert payload["code"] == "STORAGE_ERROR"
        assert "error" in payload


class TestNotificationLog:

    def test_record_and_query(self, store):
        user = store.create_user("A", "a@x.com")
        milk = store.create_product("Milk", FIXED_NOW, user.id)
        egg = store.create_product("Egg", FIXED_NOW, user.id)
        today = FIXED_NOW.date()

        assert store.notification_log.record(user.id, [milk.id, egg.id], today, success=True) == 2
        assert store.notification_log.get_notified_product_ids(today) == {milk.id, egg.id}
        assert store.notification_log.get_notified_product_ids(today + timedelta(days=1)) == set()

    def test_failed_sends_are_not_notified(self, store):
        user = store.create_user("A", "a@x.com")
        milk = store.create_product("Milk", FIXED_NOW, user.id)
        today = FIXED_NOW.date()

        store.notification_log.record(user.id, [milk.id], today, success=False, error="timeout")

        assert store.notification_log.count() == 1
        assert store.notification_log.get_notified_product_ids(today) == set()

    def test_record_nothing(self, store):
        user = store.create_user("A", "a@x.com")
        assert store.notification_log.record(user.id, [], FIXED_NOW.date(), success=True) == 0
        assert store.notification_log.count() == 0
