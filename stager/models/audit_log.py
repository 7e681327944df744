from datetime import datetime, timezone
from stager.extensions import db


class AdminAction(db.Model):
    __tablename__ = "admin_actions"

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.String(64), nullable=False, index=True)
    action = db.Column(db.String(50), nullable=False)
    target_resource_type = db.Column(db.String(50))
    target_resource_id = db.Column(db.String(64), index=True)
    target_resource_name = db.Column(db.String(255))
    metadata_ = db.Column("metadata", db.JSON)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.String(512))
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    ACTIONS = {
        "VIEW_IMAGE_DETAIL",
        "DELETE_IMAGE",
        "BULK_DELETE_IMAGES",
        "DELETE_PROJECT",
    }

    def __repr__(self):
        return f"<AdminAction {self.action} by {self.admin_id}>"
