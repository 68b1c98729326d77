"""Worker bootstrap supervisor.

Launches a worker artifact, restarts it on request, guards against crash
loops and updates the artifact in place from a build server:
- Supervisor: from .supervisor import BootSupervisor, SupervisorConfig
- Updater: from .updater import JenkinsUpdater
"""

__version__ = "0.1.0"
