import logging

import httpx

from lambda_http.models.aws_v1 import APIGatewayProxyEvent

from .mangle import first_value

logger = logging.getLogger("lambda_http.redirect")


def fix_relative_redirect(
    status_code: int,
    headers: httpx.Headers,
    event: APIGatewayProxyEvent,
    domain_suffix: str = ".amazonaws.com",
) -> bool:
    """
    Prefix a root-relative Location with the stage name.

    Without a custom domain API Gateway serves the API under /<stage>/ but
    strips that segment before invoking the function, so a redirect to
    "/error" must become "/<stage>/error". Returns True if the header changed.
    """
    if not 301 <= status_code < 400:
        return False
    if not event.host.endswith(domain_suffix):
        return False
    location = first_value(headers, "Location")
    if not location.startswith("/") or not event.stage:
        return False

    fixed = f"/{event.stage}{location}"
    headers["Location"] = fixed
    logger.debug("Rewrote relative redirect", extra={"location": location, "fixed": fixed})
    return True
