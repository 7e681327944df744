"""User-facing image routes. Callers may only touch their own images."""
import logging
from flask import g

from stager.auth import login_required
from stager.blueprints import json_body, require_uuid
from stager.blueprints.api import api_bp
from stager.errors import Forbidden, NotFound, ValidationError
from stager.extensions import db
from stager.models.generation import Generation
from stager.models.source_image import SourceImage
from stager.services import cache_service, deletion_service, signing_service
from stager.services.deletion_service import DeleteRequest

logger = logging.getLogger(__name__)

MAX_SIGNED_URL_TTL = 24 * 60 * 60


def _owned_image(image_id):
    require_uuid(image_id, "image")
    image = db.session.get(SourceImage, image_id)
    if not image:
        raise NotFound("Image not found")
    if image.user_id != g.current_user.id:
        raise Forbidden("Unauthorized")
    return image


@api_bp.route("/images/<image_id>", methods=["DELETE"])
@login_required
def delete_image(image_id):
    """Delete an image and its variants. The uploaded source file is kept."""
    _owned_image(image_id)
    result = deletion_service.delete_source_image(
        image_id, DeleteRequest(delete_source_image=True)
    )
    return {"success": True, "message": result.summary(), "data": result.to_dict()}


@api_bp.route("/images/variants/<variant_id>", methods=["DELETE"])
@login_required
def delete_variant(variant_id):
    require_uuid(variant_id, "variant")
    variant = db.session.get(Generation, variant_id)
    if not variant:
        raise NotFound("Variant not found")
    if variant.source_image.user_id != g.current_user.id:
        raise Forbidden()

    result = deletion_service.delete_variant(variant_id)
    return {
        "success": True,
        "message": "Variant deleted successfully",
        "data": result.to_dict(),
    }


@api_bp.route("/images/<image_id>/variants")
@login_required
def list_variants(image_id):
    image = _owned_image(image_id)
    variants = cache_service.get_variants(image.id)
    if variants is None:
        variants = [v.to_dict() for v in image.variants]
        cache_service.set_variants(image.id, variants)
    return {"success": True, "data": variants}


@api_bp.route("/images/<image_id>/signed-url", methods=["POST"])
@login_required
def issue_signed_url(image_id):
    """Temporary link for the source image, or one of its variants.

    Body (optional): {"variantId": "...", "ttlSeconds": 3600}
    """
    image = _owned_image(image_id)
    payload = json_body()

    file_id = image.id
    variant_id = payload.get("variantId")
    if variant_id:
        require_uuid(variant_id, "variant")
        variant = db.session.get(Generation, variant_id)
        if not variant or variant.source_image_id != image.id:
            raise NotFound("Variant not found")
        if not variant.staged_image_path:
            raise NotFound("Variant has no file yet")
        file_id = variant.id

    ttl = payload.get("ttlSeconds")
    if ttl is not None:
        if isinstance(ttl, bool) or not isinstance(ttl, int) or not 0 < ttl <= MAX_SIGNED_URL_TTL:
            raise ValidationError(f"ttlSeconds: expected 1..{MAX_SIGNED_URL_TTL}")

    url, token = signing_service.build_signed_url(file_id, ttl=ttl, external=True)
    return {
        "success": True,
        "data": {
            "fileId": token.file_id,
            "url": url,
            "expires": token.expires,
            "signature": token.signature,
        },
    }
