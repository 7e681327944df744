"""Tiered deletion of source images, variants, their files and projects.

A delete request carries three independent flags. They collapse into a
single ``DeleteIntent``, highest tier first:

    delete_source_file   -> FULL_CASCADE       rows + source file + variant files, then prune dirs
    delete_source_image  -> CASCADE_KEEP_FILE  rows + variant files, source file kept
    delete_variants      -> VARIANTS_ONLY      variant rows + variant files
    (none)               -> NOOP

File removal is best-effort. A file that cannot be removed is logged and
skipped, and the rows are deleted regardless. Rows are deleted in one
transaction after the file attempts.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from stager.errors import NotFound, ValidationError
from stager.extensions import db
from stager.models.generation import Generation
from stager.models.project import Project
from stager.models.source_image import SourceImage
from stager.services import cache_service, storage_service

logger = logging.getLogger(__name__)

MAX_REASON_LENGTH = 500


class DeleteIntent(Enum):
    FULL_CASCADE = "full_cascade"
    CASCADE_KEEP_FILE = "cascade_keep_file"
    VARIANTS_ONLY = "variants_only"
    NOOP = "noop"

    @property
    def deletes_source_image(self):
        return self in (DeleteIntent.FULL_CASCADE, DeleteIntent.CASCADE_KEEP_FILE)


@dataclass(frozen=True)
class DeleteRequest:
    delete_variants: bool = False
    delete_source_image: bool = False
    delete_source_file: bool = False
    reason: Optional[str] = None

    @property
    def intent(self):
        if self.delete_source_file:
            return DeleteIntent.FULL_CASCADE
        if self.delete_source_image:
            return DeleteIntent.CASCADE_KEEP_FILE
        if self.delete_variants:
            return DeleteIntent.VARIANTS_ONLY
        return DeleteIntent.NOOP

    @classmethod
    def from_payload(cls, payload):
        """Build a request from a JSON body (camelCase keys, all optional)."""
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Invalid request body")

        flags = {}
        for key, attr in (
            ("deleteVariants", "delete_variants"),
            ("deleteSourceImage", "delete_source_image"),
            ("deleteSourceFile", "delete_source_file"),
        ):
            value = payload.get(key, False)
            if value is None:
                value = False
            if not isinstance(value, bool):
                raise ValidationError(f"{key}: expected boolean")
            flags[attr] = value

        reason = payload.get("reason")
        if reason is not None:
            if not isinstance(reason, str) or not reason.strip():
                raise ValidationError("reason: must be a non-empty string")
            if len(reason) > MAX_REASON_LENGTH:
                raise ValidationError(f"reason: at most {MAX_REASON_LENGTH} characters")

        return cls(reason=reason, **flags)

    def to_dict(self):
        return {
            "deleteVariants": self.delete_variants,
            "deleteSourceImage": self.delete_source_image,
            "deleteSourceFile": self.delete_source_file,
            "reason": self.reason,
        }


@dataclass
class DeletionResult:
    image_id: str
    intent: DeleteIntent
    source_image_deleted: bool = False
    deleted_variants: int = 0
    deleted_files: List[str] = field(default_factory=list)

    def summary(self):
        if self.source_image_deleted:
            return (
                f"Successfully deleted source image, {self.deleted_variants} variant(s), "
                f"{len(self.deleted_files)} file(s)"
            )
        if self.deleted_variants or self.deleted_files:
            return (
                f"Successfully deleted {self.deleted_variants} variant(s) "
                f"and {len(self.deleted_files)} file(s)"
            )
        return "Nothing was deleted"

    def to_dict(self):
        return {
            "imageId": self.image_id,
            "intent": self.intent.value,
            "sourceImageDeleted": self.source_image_deleted,
            "deletedVariants": self.deleted_variants,
            "deletedFiles": list(self.deleted_files),
        }


@dataclass
class VariantDeletionResult:
    variant_id: str
    source_image_id: str
    deleted_files: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "variantId": self.variant_id,
            "sourceImageId": self.source_image_id,
            "deletedFiles": list(self.deleted_files),
        }


@dataclass
class BulkDeletionResult:
    results: List[DeletionResult] = field(default_factory=list)
    not_found: List[str] = field(default_factory=list)

    @property
    def deleted_variants(self):
        return sum(r.deleted_variants for r in self.results)

    @property
    def deleted_files(self):
        return [path for r in self.results for path in r.deleted_files]

    @property
    def deleted_images(self):
        return sum(1 for r in self.results if r.source_image_deleted)

    def to_dict(self):
        return {
            "processed": len(self.results),
            "deletedImages": self.deleted_images,
            "deletedVariants": self.deleted_variants,
            "deletedFiles": self.deleted_files,
            "notFound": list(self.not_found),
        }


@dataclass
class ProjectDeletionResult:
    project_id: str
    project_name: str
    intent: DeleteIntent
    images: List[DeletionResult] = field(default_factory=list)
    moved_images: int = 0

    @property
    def deleted_files(self):
        return [path for r in self.images for path in r.deleted_files]

    def summary(self):
        action = "deleted" if self.intent.deletes_source_image else "moved to unassigned"
        files = "deleted" if self.intent is DeleteIntent.FULL_CASCADE else "preserved"
        return (
            f"Project deleted. Images {action}, source files {files}. "
            f"{len(self.deleted_files)} physical file(s) removed."
        )

    def to_dict(self):
        return {
            "projectId": self.project_id,
            "projectName": self.project_name,
            "intent": self.intent.value,
            "sourceImagesDeleted": sum(1 for r in self.images if r.source_image_deleted),
            "generationsDeleted": sum(r.deleted_variants for r in self.images),
            "sourceImagesMoved": self.moved_images,
            "filesDeleted": len(self.deleted_files),
            "summary": self.summary(),
        }


def _remove_file(path, removed):
    """Best-effort delete of one stored file; records it in ``removed`` on success."""
    if not path:
        return False
    try:
        storage_service.delete(path)
    except (OSError, ValidationError) as e:
        logger.warning("Failed to delete file %s: %s", path, e)
        return False
    removed.append(path)
    return True


def delete_source_image(image_id, delete_request):
    """Apply the tiered policy to one source image.

    Raises NotFound before touching anything if the image does not exist.
    """
    image = db.session.get(SourceImage, image_id)
    if not image:
        raise NotFound("Image not found")

    intent = delete_request.intent
    result = DeletionResult(image_id=image_id, intent=intent)
    if intent is DeleteIntent.NOOP:
        logger.info("No delete flags set for image %s, nothing deleted", image_id)
        return result

    user_id = image.user_id
    variants = list(image.variants)

    try:
        if intent is DeleteIntent.FULL_CASCADE:
            _remove_file(image.original_image_path, result.deleted_files)

        for variant in variants:
            _remove_file(variant.staged_image_path, result.deleted_files)

        if intent.deletes_source_image:
            db.session.delete(image)  # cascades to variants
            result.source_image_deleted = True
        else:
            for variant in variants:
                db.session.delete(variant)
        result.deleted_variants = len(variants)

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    cache_service.invalidate_variants(image_id, user_id)

    if intent is DeleteIntent.FULL_CASCADE:
        storage_service.prune_empty_directories(user_id)

    logger.info(
        "Deleted image %s (%s): %d variant(s), %d file(s)",
        image_id, intent.value, result.deleted_variants, len(result.deleted_files),
    )
    return result


def delete_variant(variant_id):
    """Delete one variant row and, best-effort, its file."""
    variant = db.session.get(Generation, variant_id)
    if not variant:
        raise NotFound("Variant not found")

    result = VariantDeletionResult(
        variant_id=variant_id, source_image_id=variant.source_image_id
    )
    user_id = variant.user_id

    try:
        _remove_file(variant.staged_image_path, result.deleted_files)
        db.session.delete(variant)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    cache_service.invalidate_variants(result.source_image_id, user_id)
    return result


def delete_source_images(image_ids, delete_request):
    """Apply the same request to many images; missing ids are collected, not fatal."""
    bulk = BulkDeletionResult()
    for image_id in image_ids:
        try:
            bulk.results.append(delete_source_image(image_id, delete_request))
        except NotFound:
            bulk.not_found.append(image_id)
    return bulk


def delete_project(project_id, delete_request):
    """Delete a project, applying the tiered policy to each of its images.

    Images that survive the policy are moved into their owner's
    "Unassigned Images" project before the project row is removed.
    """
    project = db.session.get(Project, project_id)
    if not project:
        raise NotFound("Project not found")

    intent = delete_request.intent
    image_ids = [
        row.id for row in
        db.session.query(SourceImage.id).filter(SourceImage.project_id == project_id)
    ]
    if project.is_unassigned and image_ids and not intent.deletes_source_image:
        raise ValidationError(
            "The unassigned project can only be deleted together with its images"
        )

    result = ProjectDeletionResult(
        project_id=project_id, project_name=project.name, intent=intent
    )
    for image_id in image_ids:
        result.images.append(delete_source_image(image_id, delete_request))

    try:
        survivors = SourceImage.query.filter_by(project_id=project_id).all()
        for image in survivors:
            target = Project.get_or_create_unassigned(image.user_id)
            image.project = target
            for variant in image.variants:
                variant.project_id = target.id
            result.moved_images += 1
        db.session.flush()

        db.session.delete(project)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "Deleted project %s (%s): %d image(s) processed, %d moved",
        project_id, intent.value, len(result.images), result.moved_images,
    )
    return result
