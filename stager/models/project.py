import uuid
from datetime import datetime, timezone
from stager.extensions import db


UNASSIGNED_PROJECT_NAME = "📥 Unassigned Images"


class Project(db.Model):
    __tablename__ = "projects"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(
        db.String(64),
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    source_images = db.relationship(
        "SourceImage", backref="project", lazy="select"
    )

    @property
    def is_unassigned(self):
        return self.name == UNASSIGNED_PROJECT_NAME

    @staticmethod
    def get_or_create_unassigned(user_id):
        """Return the user's catch-all project, creating it if needed."""
        project = Project.query.filter_by(
            user_id=user_id, name=UNASSIGNED_PROJECT_NAME
        ).first()
        if not project:
            project = Project(user_id=user_id, name=UNASSIGNED_PROJECT_NAME)
            db.session.add(project)
            db.session.flush()
        return project

    def __repr__(self):
        return f"<Project {self.name}>"
