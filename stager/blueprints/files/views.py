"""Session-less file access through signed temp links.

Order of checks: rate limit, required params, signature, expiry, lookup.
"""
import logging
from flask import g, request, send_file

from stager import extensions
from stager.auth import client_address
from stager.blueprints.files import files_bp
from stager.errors import NotFound, RateLimited, ValidationError
from stager.extensions import db
from stager.models.generation import Generation
from stager.models.source_image import SourceImage
from stager.services import signing_service, storage_service

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    # External AI services fetch these links directly
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
}


@files_bp.after_request
def add_rate_limit_headers(response):
    status = g.get("rate_limit_status")
    if status is not None:
        response.headers.update(status.headers())
    return response


def _stored_path(file_id):
    image = db.session.get(SourceImage, file_id)
    if image:
        return image.original_image_path
    variant = db.session.get(Generation, file_id)
    if variant:
        return variant.staged_image_path
    return None


@files_bp.route("/temp/files/<file_id>", methods=["GET"], provide_automatic_options=False)
def temp_file(file_id):
    ip = client_address()
    status = extensions.rate_limiter.hit(ip)
    g.rate_limit_status = status
    if not status.allowed:
        logger.warning("Rate limit exceeded for %s", ip)
        raise RateLimited(status)

    expires = request.args.get("expires")
    signature = request.args.get("signature")
    if not expires or not signature:
        raise ValidationError("Missing signature or expiry")

    signing_service.verify_token(file_id, expires, signature)

    path = _stored_path(file_id)
    if not path or not storage_service.exists(path):
        raise NotFound("File not found")

    response = send_file(
        storage_service.resolve(path),
        mimetype=storage_service.content_type_for(path),
        max_age=3600,
    )
    response.headers.update(SECURITY_HEADERS)

    logger.info("Signed URL file served: %s (IP: %s)", file_id, ip)
    return response


@files_bp.route("/temp/files/<file_id>", methods=["OPTIONS"])
def temp_file_preflight(file_id):
    return "", 200, {
        "Access-Control-Allow-Origin": request.headers.get("Origin", "*"),
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Max-Age": "86400",
    }
