"""
Subjects and bodies of every email the shop sends.

Each builder returns ``(subject, html, text)``; ``EmailService`` decides
how and whether to deliver them.
"""

from html import escape
from core.config import settings


def _format_price(amount: int) -> str:
    return f"Ksh {amount / 100:.2f}"


def verification_email(username: str, code: str) -> tuple[str, str, str]:
    minutes = settings.VERIFICATION_CODE_EXPIRE_MINUTES
    subject = "Sweet Treats - Verify Your Email"
    html = f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #d97706;">Welcome to Sweet Treats, {escape(username)}!</h2>
            <p>Your verification code is:</p>
            <h1 style="color: #d97706; font-size: 32px; letter-spacing: 4px;">{code}</h1>
            <p>This code will expire in {minutes} minutes.</p>
            <p>If you didn't create an account, please ignore this email.</p>
        </div>
    </body>
    </html>
    """
    text = (
        f"Hello {username},\n\n"
        f"Your Sweet Treats verification code is: {code}\n"
        f"This code will expire in {minutes} minutes.\n"
    )
    return subject, html, text


def password_reset_email(username: str, raw_token: str) -> tuple[str, str, str]:
    reset_url = f"{settings.FRONTEND_URL}/reset-password?token={raw_token}"
    minutes = settings.PASSWORD_RESET_EXPIRE_MINUTES
    subject = "Sweet Treats - Password Reset"
    html = f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #2c3e50;">Password Reset Request</h2>
            <p>Hello {escape(username)}, we received a request to reset your password.</p>

            <div style="margin: 30px 0;">
                <a href="{reset_url}"
                style="display: inline-block; padding: 14px 28px; background-color: #d97706;
                        color: white; text-decoration: none; border-radius: 4px; font-weight: bold;">
                    Reset Password
                </a>
            </div>

            <p style="color: #666; font-size: 14px;">This link expires in {minutes} minutes.</p>
            <p style="color: #666; font-size: 14px;">
                If you didn't request a password reset, ignore this email. Your password will remain unchanged.
            </p>

            <hr style="border: none; border-top: 1px solid #eee; margin: 20px 0;">
            <p style="color: #999; font-size: 12px;">
                If the button doesn't work, copy and paste this URL into your browser:
                <br><br>
                {reset_url}
            </p>
        </div>
    </body>
    </html>
    """
    text = (
        f"Hello {username},\n\n"
        f"Reset your Sweet Treats password here: {reset_url}\n"
        f"This link expires in {minutes} minutes. If you didn't request it, ignore this email.\n"
    )
    return subject, html, text


def password_changed_email(username: str) -> tuple[str, str, str]:
    subject = "Sweet Treats - Password Changed"
    html = f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #2c3e50;">Your password was changed</h2>
            <p>Hello {escape(username)}, the password for your Sweet Treats account was just changed.</p>
            <p>All other sessions have been signed out.</p>
            <div style="background-color: #fff3cd; border-left: 4px solid #ffc107; padding: 12px; margin: 20px 0;">
                <p style="margin: 0; color: #856404;">
                    <strong>Security Notice:</strong> If you did not make this change, reset your password immediately.
                </p>
            </div>
        </div>
    </body>
    </html>
    """
    text = (
        f"Hello {username},\n\n"
        "The password for your Sweet Treats account was just changed and all other sessions were signed out.\n"
        "If you did not make this change, reset your password immediately.\n"
    )
    return subject, html, text


def order_notification_email(order: dict) -> tuple[str, str, str]:
    items_html = "".join(
        f"<li>{escape(item['product_name'])} (x{item['quantity']}) - {_format_price(item['price'])}</li>"
        for item in order['items']
    )
    items_text = "\n".join(
        f"- {item['product_name']} (x{item['quantity']}) - {_format_price(item['price'])}"
        for item in order['items']
    )
    subject = f"New Customer Order #{order['id']}"
    html = f"""
    <h2>New Order Received</h2>
    <p><strong>Customer Name:</strong> {escape(order['customer_name'])}</p>
    <p><strong>Email:</strong> {escape(order['email'])}</p>
    <p><strong>Phone:</strong> {escape(order['phone'])}</p>
    <p><strong>Address:</strong> {escape(order['address'])}</p>
    <p><strong>Items:</strong></p><ul>{items_html}</ul>
    <p><strong>Total:</strong> {_format_price(order['total'])}</p>
    """
    text = (
        f"New order #{order['id']}\n"
        f"Customer: {order['customer_name']} <{order['email']}>, {order['phone']}\n"
        f"Address: {order['address']}\n"
        f"Items:\n{items_text}\n"
        f"Total: {_format_price(order['total'])}\n"
    )
    return subject, html, text


def custom_order_email(name: str, email: str, phone: str | None, details: str,
                       date_needed: str | None) -> tuple[str, str, str]:
    subject = f"Custom Order Request from {name}"
    html = f"""
    <h2>Custom Order Request</h2>
    <p><strong>Name:</strong> {escape(name)}</p>
    <p><strong>Email:</strong> {escape(email)}</p>
    <p><strong>Phone:</strong> {escape(phone or '-')}</p>
    <p><strong>Date needed:</strong> {escape(date_needed or '-')}</p>
    <p><strong>Details:</strong></p>
    <p>{escape(details)}</p>
    """
    text = (
        f"Custom order request from {name} <{email}>\n"
        f"Phone: {phone or '-'}\n"
        f"Date needed: {date_needed or '-'}\n\n"
        f"{details}\n"
    )
    return subject, html, text
