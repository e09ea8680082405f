from pydantic import Field

from .base import BaseSchema


class RabbitMQConfig(BaseSchema):
    """Broker connection settings as returned by the backend."""

    host: str = Field(default="", alias="HOSTNAME")
    port: int = Field(default=5672, alias="PORT")
    user: str = Field(default="", alias="USERNAME")
    password: str = Field(default="", alias="PASSWORD")
    vhost: str = Field(default="/", alias="VHOST")
    heartbeat: int | None = Field(default=None, alias="HEARTBEAT")
    frame_max: int | None = Field(default=None, alias="FRAMEMAX")


class RabbitMQConfigUpdate(BaseSchema):
    """Settings sent to persist or to probe a broker connection."""

    host: str = Field(..., min_length=1)
    port: int = Field(..., gt=0, le=65535)
    user: str
    password: str
    vhost: str = "/"

    @classmethod
    def from_config(cls, config: RabbitMQConfig) -> "RabbitMQConfigUpdate":
        return cls(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            vhost=config.vhost,
        )
