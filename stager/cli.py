"""Flask CLI commands for admin operations."""
import os
import click
from flask import current_app


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables and the upload root."""
        from stager.extensions import db

        db.create_all()
        upload_root = current_app.config["FILE_UPLOAD_PATH"]
        os.makedirs(upload_root, exist_ok=True)
        click.echo(f"Database initialized, uploads under {os.path.abspath(upload_root)}.")

    @app.cli.command("create-user")
    @click.argument("user_id")
    @click.option("--email", required=True)
    @click.option("--name", default="")
    @click.option("--admin", is_flag=True, help="Grant the admin role")
    def create_user(user_id, email, name, admin):
        """Register a user id issued by the auth provider."""
        from stager.extensions import db
        from stager.models.user import User

        if db.session.get(User, user_id):
            click.echo(f"User {user_id} already exists.")
            return
        user = User(
            id=user_id,
            email=email,
            name=name or email.split("@")[0],
            role="admin" if admin else "user",
        )
        db.session.add(user)
        db.session.commit()
        click.echo(f"Created: {user_id} — {email} [{user.role}]")

    @app.cli.command("sign-url")
    @click.argument("file_id")
    @click.option("--ttl", default=None, type=int, help="Lifetime in seconds")
    def sign_url(file_id, ttl):
        """Print a signed temp link for a source image or variant id."""
        from stager.services.signing_service import build_signed_url

        url, token = build_signed_url(file_id, ttl=ttl, external=True)
        click.echo(url)

    @app.cli.command("prune-dirs")
    @click.argument("user_id")
    def prune_dirs(user_id):
        """Remove a user's empty upload directories."""
        from stager.services.storage_service import prune_empty_directories

        removed = prune_empty_directories(user_id)
        if not removed:
            click.echo("Nothing to prune.")
        for path in removed:
            click.echo(f"Removed {path}")

    @app.cli.command("stats")
    def stats():
        """Show image and variant statistics."""
        from stager.extensions import db
        from stager.models.generation import Generation
        from stager.models.source_image import SourceImage

        images = db.session.query(db.func.count(SourceImage.id)).scalar()
        rows = (
            db.session.query(Generation.status, db.func.count(Generation.id))
            .group_by(Generation.status)
            .all()
        )
        click.echo(f"Source images: {images}")
        click.echo(f"Variants: {sum(count for _, count in rows)}")
        for status, count in sorted(rows):
            click.echo(f"  {status}: {count}")
