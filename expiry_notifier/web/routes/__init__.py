"""라우트 Blueprint 등록"""
from flask import Flask


def register_blueprints(app: Flask):
    from .api_users import users_bp

    app.register_blueprint(users_bp, url_prefix="/users")
