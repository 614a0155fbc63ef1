from dataclasses import dataclass
from datetime import datetime
from urllib.parse import urlencode


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str
    text: str


_HTML = '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8" />
    <title>{title}</title>
    <style>
        body {{ font-family: 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; background-color: #f6f8fb; margin: 0; padding: 0; color: #333; }}
        .container {{ max-width: 600px; margin: 40px auto; background-color: #fff; border-radius: 12px; overflow: hidden; }}
        .content {{ padding: 28px 32px; line-height: 1.6; }}
        .btn {{ display:inline-block; background:#2f6f3e; color:#ffffff !important; padding:12px 20px; border-radius:8px; text-decoration:none }}
    </style>
</head>
<body>
    <div class="container">
        <div class="content">
            <h3>{title}</h3>
            <p>{intro}</p>
            <p><a class="btn" href="{link}">{action}</a></p>
            <p>If the button doesn't work, copy and paste this URL into your browser:<br><a href="{link}">{link}</a></p>
            <p>{outro}</p>
        </div>
    </div>
</body>
</html>
'''


def verify_email_link(origin: str, code_id: str) -> str:
    return f"{origin}/email/verify/{code_id}"


def password_reset_link(origin: str, code_id: str, expires_at: datetime) -> str:
    # exp는 안내용일 뿐, 실제 만료는 DB 레코드 기준
    query = urlencode({"code": code_id, "exp": int(expires_at.timestamp() * 1000)})
    return f"{origin}/password/reset?{query}"


def verify_email_template(link: str) -> EmailContent:
    intro = "Thanks for signing up! Please confirm your email address to finish setting up your account."
    outro = "If you didn't create an account, you can safely ignore this message."
    return EmailContent(
        subject="Verify Email Address",
        html=_HTML.format(title="Verify your email", intro=intro, link=link, action="Verify Email", outro=outro),
        text=f"{intro}\n\nClick on the link to verify your email address: {link}\n",
    )


def password_reset_template(link: str) -> EmailContent:
    intro = "We received a request to reset your password. The link below is valid for one hour."
    outro = "If you didn't request a password reset, you can safely ignore this message."
    return EmailContent(
        subject="Password Reset Request",
        html=_HTML.format(title="Reset your password", intro=intro, link=link, action="Reset Password", outro=outro),
        text=f"{intro}\n\nClick on the link to reset your password: {link}\n",
    )
