"""
HTML result pages for the verify-email link.

The link is opened in a browser from the user's inbox, so the result is a
small standalone page rather than JSON.
"""

from html import escape

_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    body {{ font-family: Arial, sans-serif; text-align: center; padding: 50px; background-color: #f5f5f5; }}
    .container {{ max-width: 600px; margin: 0 auto; background: white; padding: 40px; border-radius: 10px; }}
    .success {{ color: #4caf50; }}
    .error {{ color: #d32f2f; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>{heading}</h1>
    <p class="{css_class}">{message}</p>
  </div>
</body>
</html>
"""


def verification_success_page() -> str:
    return _PAGE.format(
        title="Email Verified",
        heading="Email Verified Successfully!",
        css_class="success",
        message="Your email address has been verified. You can now log in to your account.",
    )


def verification_failure_page(message: str) -> str:
    return _PAGE.format(
        title="Email Verification",
        heading="Email Verification Failed",
        css_class="error",
        message=escape(message),
    )
