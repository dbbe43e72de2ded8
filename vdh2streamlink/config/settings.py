from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class StreamlinkConfig(BaseModel):
    executable: str = Field(default="streamlink", description="Streamlink executable")
    quality: str = Field(default="best", description="Stream quality passed to Streamlink")
    # retry_max=0 lets Streamlink retry forever when retry_streams is non-zero
    retry_open: int = Field(default=3, ge=0, description="Attempts at opening the stream")
    retry_streams: int = Field(default=10, ge=0, description="Delay in seconds between stream fetch attempts")
    retry_max: int = Field(default=5, ge=0, description="Max stream fetch attempts (0 = unlimited)")
    resolve_timeout: float = Field(default=60.0, gt=0, description="Timeout for --stream-url in seconds")

class PlaylistConfig(BaseModel):
    timeout: float = Field(default=30.0, gt=0, description="Playlist fetch timeout in seconds")
    log_head_chars: int = Field(default=1000, ge=0, description="Playlist head echoed in debug logs")
    log_tail_chars: int = Field(default=1000, ge=0, description="Playlist tail echoed in debug logs")

class ConverterConfig(BaseModel):
    executable: str = Field(default="curlconverter", description="curlconverter executable (npm)")

class OutputConfig(BaseModel):
    default_basename: str = Field(default="newVideo", description="Prefix of generated output names")
    log_dir_name: str = Field(default="SL_logs", description="Log directory created next to the output file")
    incomplete_suffix: str = Field(default=".incomplete", description="Suffix used while downloading")
    mime_globs_path: str = Field(default="/usr/share/mime/globs", description="freedesktop MIME globs file")

class LoggingConfig(BaseModel):
    format: str = Field(default="%(message)s", description="Log format")
    file_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log file format"
    )
    enable_rich: bool = Field(default=True, description="Enable rich console logging")

class Config(BaseModel):
    streamlink: StreamlinkConfig = Field(default_factory=StreamlinkConfig)
    playlist: PlaylistConfig = Field(default_factory=PlaylistConfig)
    converter: ConverterConfig = Field(default_factory=ConverterConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

class EnvSettings(BaseSettings):
    """Settings taken from the environment (DEBUG=0/1/2)"""
    model_config = SettingsConfigDict(extra="ignore")

    debug: int = Field(default=0, description="Verbosity: 0 off, 1 debug, 2 debug + full Streamlink log")

    @field_validator("debug", mode="before")
    @classmethod
    def validate_debug(cls, v):
        if v is None or v == "":
            return 0
        if str(v).strip() not in ("0", "1", "2"):
            raise ValueError(f"unrecognized DEBUG={v}, please stick to DEBUG=0, DEBUG=1, or DEBUG=2")
        return int(v)

config = Config()
