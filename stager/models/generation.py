import uuid
from datetime import datetime, timezone
from stager.extensions import db


class Generation(db.Model):
    """An AI-staged variant of a source image."""

    __tablename__ = "generations"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    source_image_id = db.Column(
        db.String(36),
        db.ForeignKey("source_images.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.String(64), db.ForeignKey("users.id"), nullable=False)
    project_id = db.Column(db.String(36), db.ForeignKey("projects.id"), nullable=False)
    staged_image_path = db.Column(db.String(1024))  # null until the file is written
    variation_index = db.Column(db.Integer, nullable=False, default=1)
    room_type = db.Column(db.String(30), nullable=False, default="living_room")
    staging_style = db.Column(db.String(30), nullable=False, default="modern")
    operation_type = db.Column(db.String(30), nullable=False, default="stage_empty")
    status = db.Column(db.String(20), nullable=False, default="pending")
    is_favorited = db.Column(db.Boolean, nullable=False, default=False)
    error_message = db.Column(db.Text)
    processing_time_ms = db.Column(db.Integer)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    completed_at = db.Column(db.DateTime(timezone=True))

    STATUSES = {"pending", "processing", "completed", "failed"}
    ROOM_TYPES = {"living_room", "bedroom", "kitchen", "bathroom", "office", "dining_room"}
    STAGING_STYLES = {"modern", "luxury", "traditional", "scandinavian", "industrial", "bohemian"}
    OPERATION_TYPES = {"stage_empty", "remove_furniture"}

    def to_dict(self):
        return {
            "id": self.id,
            "sourceImageId": self.source_image_id,
            "stagedImagePath": self.staged_image_path,
            "variationIndex": self.variation_index,
            "roomType": self.room_type,
            "stagingStyle": self.staging_style,
            "operationType": self.operation_type,
            "status": self.status,
            "isFavorited": self.is_favorited,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }

    def __repr__(self):
        return f"<Generation {self.id} v{self.variation_index} [{self.status}]>"
