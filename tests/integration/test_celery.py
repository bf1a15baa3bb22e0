"""Integration tests for the Celery configuration."""

import pytest

pytestmark = pytest.mark.integration


class TestCeleryConfig:
    """Celery loads through Django settings."""

    def test_celery_app_is_importable(self):
        from config.celery import app

        assert app.main == "storefront"

    def test_celery_app_exported_from_init(self):
        from config import celery_app

        assert celery_app.main == "storefront"

    def test_celery_serializer_is_json(self, settings):
        assert settings.CELERY_TASK_SERIALIZER == "json"
        assert settings.CELERY_RESULT_SERIALIZER == "json"
        assert settings.CELERY_ACCEPT_CONTENT == ["json"]

    def test_celery_timezone_matches_django(self, settings):
        assert settings.CELERY_TIMEZONE == settings.TIME_ZONE

    def test_tests_run_tasks_eagerly(self, settings):
        assert settings.CELERY_TASK_ALWAYS_EAGER is True
        assert settings.CELERY_TASK_EAGER_PROPAGATES is False


class TestNotificationTask:
    def test_task_is_registered(self):
        from config.celery import app

        assert "notifications.dispatch_status_entered" in app.tasks

    def test_retry_policy(self):
        from smtplib import SMTPException

        from modules.notifications.tasks import dispatch_status_entered

        assert SMTPException in dispatch_status_entered.autoretry_for
        assert dispatch_status_entered.max_retries == 3

    def test_eager_delay_without_email(self, make_order):
        from modules.notifications.tasks import dispatch_status_entered

        order = make_order()
        result = dispatch_status_entered.delay(str(order.id), "PENDING_PAYMENT")

        assert result.successful()
        assert result.result is False
