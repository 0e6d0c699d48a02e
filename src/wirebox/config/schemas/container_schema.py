"""Container configuration schemas."""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .logging_schema import LoggingConfig


class ContainerDefaults(BaseModel):
    """Defaults copied into every definition at registration time."""
    model_config = ConfigDict(extra="forbid")

    share: bool = Field(True, description="Build one instance per container and reuse it")
    autowire: bool = Field(True, description="Resolve class-typed parameters from the container")


class TagConfig(BaseModel):
    """A tag attached to a service; extra keys become tag attributes."""
    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Tag name")


class ServiceConfig(BaseModel):
    """Definition of one service in a configuration file."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    class_: Optional[str] = Field(None, alias="class", description="Dotted path of the class to construct")
    factory: Optional[str] = Field(None, description="Dotted path of a factory callable")
    arguments: Union[List[Any], Dict[str, Any]] = Field(
        default_factory=list, description="Positional list or name-keyed arguments"
    )
    shared: Optional[bool] = Field(None, description="Overrides defaults.share")
    autowired: Optional[bool] = Field(None, description="Overrides defaults.autowire")
    tags: List[TagConfig] = Field(default_factory=list, description="Tags attached to the service")

    @model_validator(mode="after")
    def check_single_source(self) -> "ServiceConfig":
        """A service is built either from a class or from a factory."""
        if self.class_ and self.factory:
            raise ValueError("Only one of 'class' and 'factory' may be given")
        return self


class ContainerConfig(BaseModel):
    """Complete container configuration."""
    model_config = ConfigDict(extra="forbid")

    defaults: ContainerDefaults = Field(default_factory=ContainerDefaults)
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Parameter tree")
    services: Dict[str, ServiceConfig] = Field(default_factory=dict, description="Service definitions by id")
    aliases: Dict[str, str] = Field(default_factory=dict, description="Alias to service id")
    bindings: Dict[str, str] = Field(default_factory=dict, description="Interface id to service id")
    logging: Optional[LoggingConfig] = Field(None, description="Logging setup applied on load")
