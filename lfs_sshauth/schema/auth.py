"""SSH authentication data schemas."""

import json
from typing import Dict

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)


class Endpoint(BaseModel):
    """Remote target as resolved by the caller."""

    model_config = ConfigDict(frozen=True)

    ssh_user_and_host: str = Field("", description="user@host, empty if not SSH")
    ssh_path: str = Field("", description="Remote repository path")
    ssh_port: str = Field("", description="SSH port, empty for the client default")

    @field_validator("ssh_port", mode="before")
    @classmethod
    def port_as_string(cls, v):
        if v is None:
            return ""
        if isinstance(v, int):
            return str(v)
        return v

    @property
    def host_identity(self) -> str:
        return self.ssh_user_and_host

    @property
    def is_ssh(self) -> bool:
        return bool(self.ssh_user_and_host)


class SSHAuthResponse(BaseModel):
    """Result of git-lfs-authenticate.

    ``message`` only carries the remote stderr of a failed invocation. It is
    never read from nor written to the JSON form, so a cached payload never
    contains it.
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field("", exclude=True)
    href: str = ""
    header: Dict[str, str] = Field(default_factory=dict)
    expires_at: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def drop_wire_message(cls, v, info: ValidationInfo):
        if info.context and info.context.get("wire"):
            return ""
        return v

    @field_validator("href", "expires_at", mode="before")
    @classmethod
    def null_as_empty_string(cls, v):
        return "" if v is None else v

    @field_validator("header", mode="before")
    @classmethod
    def null_as_empty_header(cls, v):
        return {} if v is None else v

    @classmethod
    def from_json(cls, data: bytes) -> "SSHAuthResponse":
        """Parse the JSON document printed by git-lfs-authenticate.

        Unknown keys are ignored and missing keys stay empty; a bare ``null``
        document is an empty response. Raises ``pydantic.ValidationError``
        for anything else that is not a JSON object of the expected shape,
        including empty input.
        """
        if data.strip() == b"null":
            return cls()
        return cls.model_validate_json(data, context={"wire": True})

    @classmethod
    def from_json_partial(cls, data: bytes) -> "SSHAuthResponse":
        """Keep whichever fields of a rejected document are individually valid."""
        try:
            doc = json.loads(data)
        except ValueError:
            return cls()
        if not isinstance(doc, dict):
            return cls()

        fields = {}
        for name in ("href", "header", "expires_at"):
            if name not in doc:
                continue
            try:
                cls.model_validate({name: doc[name]}, context={"wire": True})
            except ValidationError:
                continue
            fields[name] = doc[name]
        return cls.model_validate(fields, context={"wire": True})
