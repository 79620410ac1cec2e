import zlib
from typing import Annotated, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from monwire.bootstrap.config.loader import get_configfile


class CodecSettings(BaseModel):
    domain: Annotated[
        Literal["probe", "monitor"],
        Field(
            description=(
                "Message kind domain handled by the codec.\n"
                "'probe'   → traffic between the monitor and its probes/drivers.\n"
                "'monitor' → traffic between the monitor and the core daemon."
            ),
            default="monitor"
        )
    ]

    compression_level: Annotated[
        int,
        Field(
            description=(
                "zlib compression level applied to payloads before encoding.\n"
                "-1 selects the zlib default, 0 disables compression, 9 is the slowest."
            ),
            default=zlib.Z_DEFAULT_COMPRESSION,
            ge=-1,
            le=9
        )
    ]

    max_payload_size: Annotated[
        int,
        Field(
            description=(
                "Maximum size of a payload once decompressed.\n"
                "Frames expanding beyond this size are rejected as corrupt."
            ),
            default=64 * 1024 * 1024,
            gt=0
        )
    ]


class StreamSettings(BaseModel):
    host: Annotated[
        str,
        Field(
            description="Bind address of `monwire listen --tcp`.",
            default="127.0.0.1"
        )
    ]

    port: Annotated[
        int,
        Field(
            description="TCP port of `monwire listen --tcp`. 0 lets the OS pick one.",
            default=4124,
            ge=0,
            le=65535
        )
    ]

    max_frame_size: Annotated[
        int,
        Field(
            description="Maximum size of a frame still waiting for its newline terminator.",
            default=4 * 1024 * 1024,
            gt=0
        )
    ]

    timeout_graceful_shutdown: Annotated[
        float,
        Field(
            description="Maximum time allowed for application tasks to finish on shutdown.",
            default=5.0,
            ge=0
        )
    ]


class MonwireConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MONWIRE_",
        env_nested_delimiter="__",
        extra="allow"
    )

    codec: Annotated[
        CodecSettings,
        Field(
            description=(
                "Wire codec configuration.\n"
                "Selects the kind domain and tunes the compression stage."
            ),
            default_factory=CodecSettings
        )
    ]

    stream: Annotated[
        StreamSettings,
        Field(
            description=(
                "Newline-framed stream configuration.\n"
                "Applies runtime limits to pipes and sockets carrying frames."
            ),
            default_factory=StreamSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        configfile = get_configfile()

        if configfile is None:
            return init_settings, env_settings

        return init_settings, env_settings, YamlConfigSettingsSource(settings_cls, yaml_file=configfile)
