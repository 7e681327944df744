#!/usr/bin/env python3
"""Seed a demo user with a project, images and variants for local development."""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stager import create_app
from stager.extensions import db
from stager.models.user import User
from stager.models.project import Project
from stager.models.source_image import SourceImage
from stager.models.generation import Generation
from stager.services import storage_service

app = create_app()

DEMO_USER_ID = "demo-user"

SAMPLE_IMAGES = [
    {
        "file_name": "living-room.jpg",
        "room_type": "living_room",
        "styles": ["modern", "scandinavian"],
    },
    {
        "file_name": "master-bedroom.jpg",
        "room_type": "bedroom",
        "styles": ["luxury"],
    },
    {
        "file_name": "kitchen.jpg",
        "room_type": "kitchen",
        "styles": ["industrial", "traditional", "bohemian"],
    },
]

# Not a real JPEG, enough to exercise the file routes
PLACEHOLDER_BYTES = b"\xff\xd8\xff\xe0demo\xff\xd9"


def seed():
    with app.app_context():
        db.create_all()

        if db.session.get(User, DEMO_USER_ID):
            print("Demo user already exists — skipping.")
            return

        user = User(id=DEMO_USER_ID, email="demo@example.com", name="Demo", role="admin")
        db.session.add(user)
        project = Project(user_id=user.id, name="12 Elm Street")
        db.session.add(project)
        db.session.flush()

        for sample in SAMPLE_IMAGES:
            image = SourceImage(
                user_id=user.id,
                project_id=project.id,
                original_image_path="",
                original_file_name=sample["file_name"],
            )
            db.session.add(image)
            db.session.flush()

            image.original_image_path = f"{storage_service.sources_dir(user.id)}/{image.id}.jpg"
            storage_service.save(image.original_image_path, PLACEHOLDER_BYTES)

            for i, style in enumerate(sample["styles"], start=1):
                variant = Generation(
                    source_image_id=image.id,
                    user_id=user.id,
                    project_id=project.id,
                    variation_index=i,
                    room_type=sample["room_type"],
                    staging_style=style,
                    status="completed",
                )
                db.session.add(variant)
                db.session.flush()
                variant.staged_image_path = (
                    f"{storage_service.generations_dir(user.id, image.id)}/{variant.id}.jpg"
                )
                storage_service.save(variant.staged_image_path, PLACEHOLDER_BYTES)

            print(f"  {sample['file_name']}: {len(sample['styles'])} variant(s)")

        db.session.commit()
        print(f"Seeded {len(SAMPLE_IMAGES)} images for {DEMO_USER_ID}.")


if __name__ == "__main__":
    seed()
