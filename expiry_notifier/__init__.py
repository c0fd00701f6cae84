"""유통기한 임박 상품 알림 서비스"""

__version__ = "1.0.0"
