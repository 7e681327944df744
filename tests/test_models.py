"""Tests for database models."""
from stager.models.generation import Generation
from stager.models.project import Project, UNASSIGNED_PROJECT_NAME
from stager.models.source_image import SourceImage


def test_source_image_creation(db, make_user, make_image):
    user = make_user()
    image = make_image(user, variant_files=[True, False])

    assert image.id is not None
    assert image.original_image_path == f"user-1/sources/{image.id}.jpg"
    assert image.name == "room.jpg"
    assert [v.variation_index for v in image.variants] == [1, 2]


def test_source_image_to_dict(db, make_user, make_image):
    user = make_user()
    image = make_image(user, variant_files=[True])

    data = image.to_dict()
    assert data["id"] == image.id
    assert data["userId"] == "user-1"
    assert len(data["variants"]) == 1
    assert data["variants"][0]["status"] == "completed"


def test_deleting_source_image_cascades_variants(db, make_user, make_image):
    user = make_user()
    image = make_image(user, variant_files=[True, True])

    db.session.delete(image)
    db.session.commit()

    assert SourceImage.query.count() == 0
    assert Generation.query.count() == 0


def test_unassigned_project_get_or_create(db, make_user):
    user = make_user()

    first = Project.get_or_create_unassigned(user.id)
    second = Project.get_or_create_unassigned(user.id)

    assert first.id == second.id
    assert first.name == UNASSIGNED_PROJECT_NAME
    assert first.is_unassigned


def test_user_roles(db, make_user):
    assert not make_user("u-plain").is_admin
    assert make_user("u-admin", role="admin").is_admin
