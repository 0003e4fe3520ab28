"""
easygit - Git made easy

A CLI that wraps common git workflows, starting with a single command that
reconciles a branch with its remote.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from easygit.core.config.models import EasyGitConfig
from easygit.core.sync.models import ReconciliationRequest, Strategy

__all__ = ["EasyGitConfig", "ReconciliationRequest", "Strategy", "__version__"]
