from .job_scheduler import ExpiryJobScheduler

__all__ = ["ExpiryJobScheduler"]
