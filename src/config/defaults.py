"""Fixed names and descriptions for the workspaces created on bootstrap."""

from src.models.common import WorkspaceType

DEFAULT_WORKSPACE_NAME = "Default Workspace"
DEFAULT_WORKSPACE_DESC = (
    "Your personal space to organize tasks, ideas, and notes. "
    "Only you have access to this workspace."
)
ROADMAP_WORKSPACE_NAME = "Roadmap Workspace"
ROADMAP_WORKSPACE_DESC = (
    "A dedicated workspace to manage roadmaps, milestones, "
    "and learning or project journeys."
)
PROJECT_WORKSPACE_NAME = "Project Workspace"
PROJECT_WORKSPACE_DESC = (
    "A collaborative workspace for teams to work together on tasks, "
    "discussions, and shared goals."
)

# Creation order matters for listings: DEFAULT, ROADMAP, GROUP_PROJECT.
BOOTSTRAP_WORKSPACES: tuple[tuple[str, str, WorkspaceType], ...] = (
    (DEFAULT_WORKSPACE_NAME, DEFAULT_WORKSPACE_DESC, WorkspaceType.DEFAULT),
    (ROADMAP_WORKSPACE_NAME, ROADMAP_WORKSPACE_DESC, WorkspaceType.ROADMAP),
    (PROJECT_WORKSPACE_NAME, PROJECT_WORKSPACE_DESC, WorkspaceType.GROUP_PROJECT),
)
