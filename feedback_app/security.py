from flask_talisman import Talisman


def init_security(app):
    """
    Production/staging security headers. The service only returns JSON,
    spreadsheets and data URIs, so the CSP denies everything else.
    """
    csp = {
        "default-src": ["'none'"],
        "img-src": ["'self'", "data:"],
        "frame-ancestors": ["'none'"],
        "base-uri": ["'none'"],
        "form-action": ["'self'"],
    }

    Talisman(
        app,
        content_security_policy=csp,
        force_https=True,
        strict_transport_security=True,
        frame_options="DENY",
        referrer_policy="no-referrer",
    )
