import uuid
from datetime import datetime, timezone
from stager.extensions import db


class SourceImage(db.Model):
    __tablename__ = "source_images"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(
        db.String(64),
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    project_id = db.Column(
        db.String(36),
        db.ForeignKey("projects.id"),
        nullable=False,
        index=True,
    )
    original_image_path = db.Column(db.String(1024), nullable=False)  # relative to FILE_UPLOAD_PATH
    original_file_name = db.Column(db.String(255), nullable=False)
    display_name = db.Column(db.String(255))
    file_size = db.Column(db.Integer)
    is_favorited = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    variants = db.relationship(
        "Generation",
        backref="source_image",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="Generation.variation_index",
    )

    @property
    def name(self):
        return self.display_name or self.original_file_name

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "projectId": self.project_id,
            "originalImagePath": self.original_image_path,
            "originalFileName": self.original_file_name,
            "displayName": self.name,
            "fileSize": self.file_size,
            "isFavorited": self.is_favorited,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "variants": [v.to_dict() for v in self.variants],
        }

    def __repr__(self):
        return f"<SourceImage {self.id} {self.original_image_path}>"
