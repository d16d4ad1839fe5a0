from __future__ import annotations

from celery.utils.log import get_task_logger

from app.celery_app import celery_app
from app.services.mail_service import MailService

logger = get_task_logger(__name__)

TASK_SEND_VERIFICATION_EMAIL = "app.tasks.mail.send_verification_email"
TASK_SEND_RESET_PASSWORD_EMAIL = "app.tasks.mail.send_reset_password_email"


@celery_app.task(name=TASK_SEND_VERIFICATION_EMAIL)
def send_verification_email(email: str, name: str, verify_token: str) -> None:
    logger.info("Sending verification email to %s", email)
    MailService().send_verification_email(email, name, verify_token)


@celery_app.task(name=TASK_SEND_RESET_PASSWORD_EMAIL)
def send_reset_password_email(email: str, name: str, link: str) -> None:
    logger.info("Sending password reset email to %s", email)
    MailService().send_reset_password_email(email, name, link)
