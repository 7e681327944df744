import pytest
from stager import create_app
from stager.extensions import db as _db
from stager.models.generation import Generation
from stager.models.project import Project
from stager.models.source_image import SourceImage
from stager.models.user import User
from stager.services import storage_service


@pytest.fixture
def app(tmp_path):
    """Create application for testing with a throwaway upload root."""
    app = create_app("testing")
    app.config["FILE_UPLOAD_PATH"] = str(tmp_path / "uploads")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def upload_root(app, tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def make_user(db):
    def _make(user_id="user-1", role="user", suspended=False):
        user = User(
            id=user_id,
            email=f"{user_id}@example.com",
            name=user_id,
            role=role,
            suspended=suspended,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_image(db):
    """Create a source image with variants, writing their files to disk.

    ``variant_files`` lists, per variant, whether its file is written.
    A variant given ``None`` has no staged path at all.
    """

    def _make(user, project=None, variant_files=(), write_source=True, name="room.jpg"):
        if project is None:
            project = Project(user_id=user.id, name="Listing")
            db.session.add(project)
            db.session.flush()

        image = SourceImage(
            user_id=user.id,
            project_id=project.id,
            original_image_path="",
            original_file_name=name,
        )
        db.session.add(image)
        db.session.flush()
        image.original_image_path = f"{storage_service.sources_dir(user.id)}/{image.id}.jpg"
        if write_source:
            storage_service.save(image.original_image_path, b"source-bytes")

        for i, write in enumerate(variant_files, start=1):
            variant = Generation(
                source_image_id=image.id,
                user_id=user.id,
                project_id=project.id,
                variation_index=i,
                status="completed",
            )
            db.session.add(variant)
            db.session.flush()
            if write is not None:
                variant.staged_image_path = (
                    f"{storage_service.generations_dir(user.id, image.id)}/{variant.id}.jpg"
                )
                if write:
                    storage_service.save(variant.staged_image_path, b"variant-bytes")

        db.session.commit()
        return image

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"X-User-Id": user.id}

    return _headers
