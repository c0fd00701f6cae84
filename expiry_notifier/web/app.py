"""Flask 앱 생성"""
from typing import Optional

from flask import Flask, jsonify, request

from expiry_notifier.domain.exceptions import ExpiryNotifierError, StorageError
from expiry_notifier.infrastructure.database.store import Store
from expiry_notifier.settings.app_config import AppConfig, load_config
from expiry_notifier.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(store: Optional[Store] = None, config: Optional[AppConfig] = None) -> Flask:
    """Flask 앱 팩토리

    Args:
        store: 공유 Store. None이면 config.db_path로 생성 후 스키마 초기화.
        config: AppConfig. None이면 환경변수에서 로드.
    """
    if config is None:
        config = load_config()
    if store is None:
        store = Store(config.db_path)
        store.init()

    app = Flask(__name__)
    app.config["STORE"] = store
    app.config["APP_CONFIG"] = config
    app.json.sort_keys = False

    from .routes import register_blueprints

    register_blueprints(app)

    @app.before_request
    def log_request():
        """접근 로깅"""
        logger.info(f"[API] {request.method} {request.path} from {request.remote_addr}")

    @app.after_request
    def add_security_headers(response):
        """보안 헤더 추가"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Cache-Control'] = 'no-store'
        return response

    # 도메인 예외 → JSON 응답
    @app.errorhandler(ExpiryNotifierError)
    def handle_app_error(e):
        if isinstance(e, StorageError):
            logger.error(f"[API] {request.method} {request.path} 저장소 오류: {e}")
        return jsonify(e.to_dict()), e.http_status

    # 전역 에러 핸들러 (일관된 JSON 응답)
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "요청한 리소스를 찾을 수 없습니다", "code": "NOT_FOUND"}), 404

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"error": "서버 내부 오류가 발생했습니다", "code": "INTERNAL_ERROR"}), 500

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": "잘못된 요청입니다", "code": "BAD_REQUEST"}), 400

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "허용되지 않는 HTTP 메서드입니다", "code": "METHOD_NOT_ALLOWED"}), 405

    return app
