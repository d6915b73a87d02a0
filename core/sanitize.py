from markupsafe import Markup, escape as _escape


def escape(value) -> Markup:
    """HTML-escape untrusted input. The result is a str that Jinja will not escape twice."""
    return _escape(str(value) if value is not None else '')
