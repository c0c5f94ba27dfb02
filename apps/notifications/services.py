import logging
import re
from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client as TwilioClient
from .models import Notification

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r'^\+\d{9,15}$')


def send_email(user, subject, message):
    if not settings.NOTIFICATIONS_EMAIL_ENABLED or not user.email:
        return False
    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
            fail_silently=False,
        )
        logger.info(f"Email notification sent to {user.email}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {user.email}: {str(e)}")
        return False


def send_sms(user, message):
    if not settings.NOTIFICATIONS_SMS_ENABLED or not user.phone_number:
        return False
    if not PHONE_PATTERN.match(user.phone_number):
        logger.warning(f"Invalid phone number format for user {user.id}: {user.phone_number}")
        return False
    try:
        twilio_client = TwilioClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        twilio_client.messages.create(
            body=message,
            from_=settings.TWILIO_PHONE_NUMBER,
            to=user.phone_number
        )
        logger.info(f"SMS notification sent to {user.phone_number}")
        return True
    except TwilioRestException as e:
        logger.error(f"Failed to send SMS to {user.phone_number}: {str(e)}")
        return False


def send_notification(user, subject, email_message, sms_message=None):
    """
    Deliver a notification over email and SMS.

    Falls back to email when SMS is enabled but could not be delivered.
    Delivery problems are logged and never raised to the caller.
    """
    emailed = send_email(user, subject, email_message)
    if sms_message and settings.NOTIFICATIONS_SMS_ENABLED and user.phone_number:
        if not send_sms(user, sms_message) and not emailed:
            send_email(user, subject, email_message)


def notify(recipient, type, title, body, entity=None, meta=None):
    """
    Record an in-app notification and schedule email/SMS delivery.

    The record is written inside the caller's transaction so it disappears
    if the caller rolls back; delivery only happens once the transaction
    commits.
    """
    notification = Notification.objects.create(
        recipient=recipient,
        type=type,
        title=title,
        body=body,
        entity_type=entity._meta.model_name if entity is not None else '',
        entity_id=entity.pk if entity is not None else None,
        meta=meta or {},
    )
    logger.info(f"Notification {type} queued for user {recipient.id}")

    def deliver():
        try:
            send_notification(recipient, title, body, sms_message=f"ShiftPay: {title}")
        except Exception as e:
            logger.error(f"Failed to deliver notification {notification.id}: {str(e)}")

    transaction.on_commit(deliver)
    return notification
