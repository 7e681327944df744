"""Admin moderation routes. Every mutating call is written to the audit trail."""
import logging
from flask import g, request

from stager.auth import admin_required, client_address, user_agent
from stager.blueprints import json_body, require_uuid
from stager.blueprints.admin import admin_bp
from stager.errors import NotFound, ValidationError
from stager.extensions import db
from stager.models.audit_log import AdminAction
from stager.models.source_image import SourceImage
from stager.services import audit_service, deletion_service
from stager.services.deletion_service import DeleteRequest

logger = logging.getLogger(__name__)

MAX_BULK_IMAGES = 100


def _audit(action, target_type, target_id, target_name, metadata):
    audit_service.log_admin_action(
        g.current_user.id,
        action,
        target_type,
        target_id,
        target_name,
        metadata=metadata,
        ip_address=client_address(),
        user_agent=user_agent(),
    )


@admin_bp.route("/images/<image_id>")
@admin_required
def image_detail(image_id):
    require_uuid(image_id, "image")
    image = db.session.get(SourceImage, image_id)
    if not image:
        raise NotFound("Image not found")

    data = image.to_dict()
    _audit(
        "VIEW_IMAGE_DETAIL", "image", image_id, image.original_file_name,
        {"projectId": image.project_id, "variantCount": len(data["variants"])},
    )
    return {"success": True, "message": "Image retrieved successfully", "data": data}


@admin_bp.route("/images/<image_id>", methods=["DELETE"])
@admin_required
def delete_image(image_id):
    """Tiered delete. Body: {deleteVariants, deleteSourceImage, deleteSourceFile, reason}."""
    require_uuid(image_id, "image")
    delete_request = DeleteRequest.from_payload(json_body())

    image = db.session.get(SourceImage, image_id)
    if not image:
        raise NotFound("Image not found")
    image_name = image.original_file_name

    result = deletion_service.delete_source_image(image_id, delete_request)

    _audit(
        "DELETE_IMAGE", "image", image_id, image_name,
        {
            "deleteOptions": delete_request.to_dict(),
            "sourceImageDeleted": result.source_image_deleted,
            "deletedVariants": result.deleted_variants,
            "deletedFiles": len(result.deleted_files),
            "reason": delete_request.reason,
        },
    )
    return {"success": True, "message": result.summary(), "data": result.to_dict()}


@admin_bp.route("/images/bulk-delete", methods=["POST"])
@admin_required
def bulk_delete_images():
    """Body: {imageIds: [...], deleteVariants, deleteSourceImage, deleteSourceFile, reason}."""
    payload = json_body()
    image_ids = payload.get("imageIds")
    if not isinstance(image_ids, list) or not image_ids:
        raise ValidationError("imageIds: expected a non-empty list")
    if len(image_ids) > MAX_BULK_IMAGES:
        raise ValidationError(f"imageIds: at most {MAX_BULK_IMAGES} per request")
    for image_id in image_ids:
        require_uuid(image_id, "image")

    flags = {k: v for k, v in payload.items() if k != "imageIds"}
    delete_request = DeleteRequest.from_payload(flags)

    bulk = deletion_service.delete_source_images(image_ids, delete_request)

    _audit(
        "BULK_DELETE_IMAGES", "image", None, f"{len(image_ids)} image(s)",
        {
            "imageIds": image_ids,
            "deleteOptions": delete_request.to_dict(),
            "deletedImages": bulk.deleted_images,
            "deletedVariants": bulk.deleted_variants,
            "deletedFiles": len(bulk.deleted_files),
            "notFound": bulk.not_found,
            "reason": delete_request.reason,
        },
    )
    return {
        "success": True,
        "message": (
            f"Processed {len(bulk.results)} image(s): {bulk.deleted_images} deleted, "
            f"{bulk.deleted_variants} variant(s), {len(bulk.deleted_files)} file(s)"
        ),
        "data": bulk.to_dict(),
    }


@admin_bp.route("/projects/<project_id>", methods=["DELETE"])
@admin_required
def delete_project(project_id):
    require_uuid(project_id, "project")
    delete_request = DeleteRequest.from_payload(json_body())

    result = deletion_service.delete_project(project_id, delete_request)

    _audit(
        "DELETE_PROJECT", "project", project_id, result.project_name,
        {
            "deleteOptions": delete_request.to_dict(),
            "imagesProcessed": len(result.images),
            "imagesMoved": result.moved_images,
            "deletedFiles": len(result.deleted_files),
            "reason": delete_request.reason,
        },
    )
    return {
        "success": True,
        "message": f'Project "{result.project_name}" deleted successfully',
        "data": result.to_dict(),
    }


@admin_bp.route("/audit")
@admin_required
def audit_log():
    action = request.args.get("action")
    if action and action not in AdminAction.ACTIONS:
        raise ValidationError("Unknown action")
    limit = request.args.get("limit", 100, type=int)
    if not 0 < limit <= 500:
        raise ValidationError("limit: expected 1..500")

    entries = audit_service.recent_actions(
        admin_id=request.args.get("adminId"), action=action, limit=limit
    )
    return {
        "success": True,
        "data": [
            {
                "id": e.id,
                "adminId": e.admin_id,
                "action": e.action,
                "targetType": e.target_resource_type,
                "targetId": e.target_resource_id,
                "targetName": e.target_resource_name,
                "metadata": e.metadata_,
                "ipAddress": e.ip_address,
                "userAgent": e.user_agent,
                "createdAt": e.created_at.isoformat() if e.created_at else None,
            }
            for e in entries
        ],
    }
