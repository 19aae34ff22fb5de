"""HTML email templates. All interpolated user content is escaped."""

from html import escape


def _layout(heading: str, heading_color: str, body: str, footer: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
      <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
      </head>
      <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background-color: #1e40af; color: white; padding: 20px; text-align: center; border-radius: 8px 8px 0 0;">
          <h1 style="margin: 0; font-size: 24px;">CampusCircle</h1>
        </div>
        <div style="background-color: #f9fafb; padding: 30px; border-radius: 0 0 8px 8px;">
          <h2 style="color: {heading_color}; margin-top: 0;">{heading}</h2>
          {body}
          <hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;">
          <p style="color: #6b7280; font-size: 14px; margin: 0;">{footer}</p>
        </div>
      </body>
    </html>
    """


def _button(url: str, label: str) -> str:
    return (
        f'<p><a href="{escape(url, quote=True)}" style="display: inline-block; '
        "background-color: #1e40af; color: white; padding: 12px 24px; "
        f'text-decoration: none; border-radius: 6px; font-weight: bold;">{label}</a></p>'
    )


def get_unread_message_email_template(
    user_name: str, sender_name: str, message_content: str, conversation_url: str
) -> str:
    body = f"""
          <p>Hi {escape(user_name)},</p>
          <p><strong>{escape(sender_name)}</strong> sent you a message:</p>
          <div style="background-color: white; padding: 15px; border-left: 4px solid #1e40af; margin: 20px 0; border-radius: 4px;">
            <p style="margin: 0; color: #555;">{escape(message_content)}</p>
          </div>
          {_button(conversation_url, "View Message")}
    """
    return _layout(
        "You have an unread message",
        "#1e40af",
        body,
        "This is an automated notification from CampusCircle. "
        "You received this email because you have unread messages.",
    )


def format_rupiah(amount: int) -> str:
    return f"Rp {amount:,}"
