from stager.models.user import User
from stager.models.project import Project
from stager.models.source_image import SourceImage
from stager.models.generation import Generation
from stager.models.audit_log import AdminAction

__all__ = ["User", "Project", "SourceImage", "Generation", "AdminAction"]
