from .artifact_service import ArtifactService

__all__ = ["ArtifactService"]
