"""SQLAlchemy models for the content repurposer."""
from repurposer.models.project import Project
from repurposer.models.generated_content import GeneratedContent
from repurposer.models.project_file import ProjectFile
from repurposer.models.repurposed_content import RepurposedContent

__all__ = [
    "Project",
    "GeneratedContent",
    "ProjectFile",
    "RepurposedContent",
]
