"""사용자/상품 API Blueprint"""

from flask import Blueprint, current_app, jsonify, request

from expiry_notifier.domain.exceptions import ValidationError
from expiry_notifier.domain.models import parse_timestamp
from expiry_notifier.utils.logger import get_logger

logger = get_logger(__name__)

users_bp = Blueprint("users", __name__)


def _store():
    return current_app.config["STORE"]


def _json_body() -> dict:
    """요청 본문을 JSON 객체로 파싱. 형식 오류는 ValidationError."""
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    return data


def _optional_str(data: dict, key: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"'{key}' must be a string")
    return value


# ── 사용자 ──────────────────────────────────────────────

@users_bp.route("", methods=["POST"])
def create_user():
    """사용자 생성. body: {name, email}"""
    data = _json_body()
    user = _store().create_user(_optional_str(data, "name"), _optional_str(data, "email"))
    logger.info(f"[API] 사용자 생성: id={user.id}")
    return jsonify(user.to_dict())


@users_bp.route("", methods=["GET"])
def list_users():
    """사용자 목록 (소유 상품 포함)"""
    users = _store().list_users_with_products()
    return jsonify([u.to_dict() for u in users])


# ── 사용자 소유 상품 ─────────────────────────────────────

@users_bp.route("/<int:user_id>/products", methods=["POST"])
def add_product_to_user(user_id: int):
    """상품 등록. body: {name, expiry}, expiry는 ISO-8601 (예: 2025-10-08T15:04:05Z)"""
    data = _json_body()
    name = _optional_str(data, "name")
    raw_expiry = data.get("expiry")
    try:
        expiry = parse_timestamp(raw_expiry)
    except (TypeError, ValueError) as e:
        raise ValidationError("'expiry' must be an ISO-8601 timestamp") from e

    product = _store().create_product(name, expiry, user_id)
    logger.info(f"[API] 상품 등록: id={product.id}, user_id={user_id}")
    return jsonify(product.to_dict())


@users_bp.route("/<int:user_id>/products", methods=["GET"])
def list_user_products(user_id: int):
    """사용자 소유 상품 목록"""
    products = _store().list_products_for_user(user_id)
    return jsonify([p.to_dict() for p in products])
