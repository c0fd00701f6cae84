from .expiry_alert_flow import ExpiryAlertFlow

__all__ = ["ExpiryAlertFlow"]
