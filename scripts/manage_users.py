"""사용자/상품 관리 CLI

Usage:
    python scripts/manage_users.py create --name A --email a@x.com
    python scripts/manage_users.py list
    python scripts/manage_users.py add-product --user-id 1 --name Milk --expiry 2025-10-08T15:04:05Z
    python scripts/manage_users.py products --user-id 1
"""

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from expiry_notifier.domain.exceptions import ExpiryNotifierError
from expiry_notifier.domain.models import parse_timestamp
from expiry_notifier.infrastructure.database.store import Store
from expiry_notifier.settings.app_config import load_config


def _open_store() -> Store:
    store = Store(load_config().db_path)
    store.init()
    return store


def cmd_create(args):
    user = _open_store().create_user(args.name, args.email)
    print(f"[OK] 사용자 생성 완료: id={user.id}, name={user.name}, email={user.email}")
    return 0


def cmd_list(args):
    users = _open_store().list_users_with_products()

    if not users:
        print("등록된 사용자가 없습니다.")
        return 0

    header = f"{'ID':>4}  {'이름':<15} {'이메일':<30} {'상품수':>6}"
    print(header)
    print("-" * len(header))
    for u in users:
        print(f"{u.id:>4}  {u.name:<15} {u.email:<30} {len(u.products):>6}")
    return 0


def cmd_add_product(args):
    try:
        expiry = parse_timestamp(args.expiry)
    except ValueError:
        print(f"[ERROR] 유통기한 형식이 올바르지 않습니다: {args.expiry}")
        return 1

    try:
        product = _open_store().create_product(args.name, expiry, args.user_id)
    except ExpiryNotifierError as e:
        print(f"[ERROR] {e.message}")
        return 1
    print(f"[OK] 상품 등록 완료: id={product.id}, user_id={product.user_id}, "
          f"expiry={product.expiry.isoformat()}")
    return 0


def cmd_products(args):
    try:
        products = _open_store().list_products_for_user(args.user_id)
    except ExpiryNotifierError as e:
        print(f"[ERROR] {e.message}")
        return 1

    if not products:
        print("등록된 상품이 없습니다.")
        return 0
    for p in products:
        print(f"{p.id:>4}  {p.name:<20} {p.expiry.isoformat()}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="유통기한 알림 사용자 관리")
    sub = parser.add_subparsers(dest="command", help="명령어")
    sub.required = True

    p_create = sub.add_parser("create", help="사용자 생성")
    p_create.add_argument("--name", required=True, help="표시 이름")
    p_create.add_argument("--email", required=True, help="알림 수신 이메일")
    p_create.set_defaults(func=cmd_create)

    p_list = sub.add_parser("list", help="사용자 목록")
    p_list.set_defaults(func=cmd_list)

    p_add = sub.add_parser("add-product", help="상품 등록")
    p_add.add_argument("--user-id", type=int, required=True, help="소유 사용자 id")
    p_add.add_argument("--name", required=True, help="상품명")
    p_add.add_argument("--expiry", required=True, help="유통기한 (ISO-8601)")
    p_add.set_defaults(func=cmd_add_product)

    p_products = sub.add_parser("products", help="사용자 상품 목록")
    p_products.add_argument("--user-id", type=int, required=True, help="사용자 id")
    p_products.set_defaults(func=cmd_products)

    args = parser.parse_args()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
