"""
Configuration data models for easygit.

These models define the structure of .easygit/config.json and
~/.config/easygit/config.json files, with validation via Pydantic.
"""

from pydantic import BaseModel, ConfigDict, Field


class CoreConfig(BaseModel):
    """
    Core synchronization settings.

    Controls the defaults `easygit sync` uses when no flag is given.
    """
    sync_strategy: str = Field(
        default="rebase",
        pattern="^(rebase|merge)$",
        description="How to integrate remote commits when behind: 'rebase' or 'merge'"
    )
    default_remote: str = Field(
        default="origin",
        min_length=1,
        description="Remote used when --remote is not given"
    )


class EasyGitConfig(BaseModel):
    """
    Top-level easygit configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = EasyGitConfig(core=CoreConfig(sync_strategy="merge"))
        >>> config.core.sync_strategy
        'merge'
    """
    core: CoreConfig = Field(
        default_factory=CoreConfig,
        description="Core synchronization settings"
    )

    model_config = ConfigDict(
        extra="allow",  # Settings of other easygit commands live in the same file
        validate_assignment=True,
    )
