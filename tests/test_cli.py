"""Tests for Flask CLI commands."""
from stager.models.user import User
from stager.services import storage_service


def test_create_user(app, db):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["create-user", "u-42", "--email", "a@example.com", "--admin"])

    assert result.exit_code == 0
    assert db.session.get(User, "u-42").is_admin


def test_sign_url(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["sign-url", "abc", "--ttl", "60"])

    assert result.exit_code == 0
    assert "/api/temp/files/abc?expires=" in result.output


def test_prune_dirs(app, upload_root):
    (upload_root / "u-1" / "sources").mkdir(parents=True)
    storage_service.save("u-2/sources/keep.jpg", b"x")
    runner = app.test_cli_runner()

    result = runner.invoke(args=["prune-dirs", "u-1"])

    assert "Removed u-1" in result.output
    assert not (upload_root / "u-1").exists()


def test_stats(app, make_user, make_image):
    make_image(make_user(), variant_files=[True, False])
    runner = app.test_cli_runner()

    result = runner.invoke(args=["stats"])

    assert "Source images: 1" in result.output
    assert "completed: 2" in result.output
