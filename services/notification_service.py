# services/notification_service.py

import json
from threading import Thread

from flask import current_app
from flask_mail import Message

from db.extensions import db, mail, redis_client
from models.adminNotification import AdminNotification


def send_async_email(app, msg):
    """Send email in a background thread so the request doesn't wait on SMTP."""
    with app.app_context():
        try:
            mail.send(msg)
            app.logger.info("✅ Alert email sent")
        except Exception as e:
            app.logger.error(f"❌ Failed to send alert email: {str(e)}")


class NotificationService:

    @staticmethod
    def emit(title, message, type, link=None):
        """
        Best effort: store the admin notification, publish it for live
        dashboards and mail it when ADMIN_ALERT_EMAIL is set. Never raises.
        """
        try:
            notification = AdminNotification(title=title, message=message, type=type, link_url=link)
            db.session.add(notification)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"❌ Failed to store notification '{title}': {e}")
            return False

        payload = notification.to_dict()

        try:
            redis_client.publish(current_app.config['NOTIFICATION_CHANNEL'], json.dumps(payload))
        except Exception as e:
            current_app.logger.warning(f"⚠️  Failed to publish notification {notification.id}: {e}")

        recipient = current_app.config.get('ADMIN_ALERT_EMAIL')
        if recipient:
            try:
                msg = Message(
                    subject=title,
                    recipients=[recipient],
                    body=f"{message}\n\n{link or ''}".strip(),
                    sender=current_app.config['MAIL_DEFAULT_SENDER'],
                )
                Thread(
                    target=send_async_email,
                    args=(current_app._get_current_object(), msg),
                    daemon=True,
                ).start()
            except Exception as e:
                current_app.logger.warning(f"⚠️  Failed to queue alert email: {e}")

        current_app.logger.info(f"Notification {notification.id} emitted: {title}")
        return True

    @staticmethod
    def unpaid_session_ended(station_name):
        return NotificationService.emit(
            title="Unpaid session ended",
            message=f"Session on {station_name} has ended and is unpaid.",
            type="session_alert",
            link="/dashboard/sessions",
        )
