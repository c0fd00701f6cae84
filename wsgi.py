"""WSGI entry point (API만, 스케줄러 없음).

    waitress-serve --port=8081 wsgi:application
"""

from expiry_notifier.web.app import create_app

application = create_app()
