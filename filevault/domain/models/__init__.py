from .file import File, FileStats
from .folder import Folder
from .health_status import HealthStatus
from .identity import Credential, Identity

__all__ = ["File", "FileStats", "Folder", "HealthStatus", "Credential", "Identity"]
