from fastapi import Request

from src.app.services.event_recorder import RequestContext


def extract_request_context(request: Request) -> RequestContext:
    """
    Network provenance of the current request.

    IP prefers the first X-Forwarded-For entry, then the socket peer address.
    User agent is copied verbatim, or None when the header is absent.
    """
    ip_address = None
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip_address = forwarded_for.split(",")[0].strip() or None

    if ip_address is None and request.client is not None:
        ip_address = request.client.host

    return RequestContext(
        ip_address=ip_address,
        user_agent=request.headers.get("user-agent"),
    )
