"""Celery beat scheduling for recurring pipeline runs."""
