from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 12 GB: the signer is a JVM tool and reserves a large virtual heap up front.
_DEFAULT_RLIMIT_AS_BYTES = 12 * 1024 * 1024 * 1024


class Settings(BaseSettings):
    """Tool locations and process limits loaded from environment variables.

    Every field can be set with a ``BUNDLEPATCH_`` prefixed variable, e.g.
    ``BUNDLEPATCH_UBER_APK_SIGNER_JAR=/opt/uber-apk-signer.jar``.

    patch_command
    ─────────────
    A shell-style command line run once per artifact. The placeholders
    ``{input}``, ``{output}`` and ``{tmp_dir}`` are substituted per artifact
    after the line has been split into arguments, so paths containing
    spaces are passed through intact.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUNDLEPATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Signing
    java_path: str = "java"
    uber_apk_signer_jar: str = "uber-apk-signer.jar"

    # Per-artifact patch tool
    patch_command: str = ""

    # Child process rlimits. 0 disables a cap. The CPU cap is opt-in: it
    # counts CPU time across every JVM thread, not wall-clock time.
    rlimit_as_bytes: int = _DEFAULT_RLIMIT_AS_BYTES
    rlimit_cpu_seconds: int = 0

    # Logging
    debug: bool = False

    @field_validator("rlimit_as_bytes", "rlimit_cpu_seconds", mode="before")
    @classmethod
    def clamp_negative_limit(cls, v: object) -> object:
        if isinstance(v, (int, str)) and int(v) < 0:
            return 0
        return v


def get_settings() -> Settings:
    return Settings()
