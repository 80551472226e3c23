"""Configuration management for autoloadgen."""

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import RequireMethod

DEFAULT_CACHE_FILENAME = ".generate-autoload-cache.json"


class GeneratorSettings(BaseSettings):
    """Defaults for a generator run, overridable from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="GENERATE_AUTOLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables
    )

    require_method: RequireMethod = Field(
        default=RequireMethod.REQUIRE_ONCE,
        description="Statement used to load files from the autoloader",
    )
    case_insensitive: bool = Field(default=False, description="Autoload classes case insensitively")
    prepend_autoload: bool = Field(default=False, description="Prepend the autoloader to the SPL stack")
    generated_by: Optional[str] = Field(
        default=None,
        description="Provenance text for the generated file (defaults to the command line)",
    )

    use_cache: bool = Field(default=True, description="Reuse scan results of unchanged files")
    cache_filename: str = Field(
        default=DEFAULT_CACHE_FILENAME,
        description="Cache file name, placed next to the output file",
    )

    hack_compiler: Optional[str] = Field(
        default=None,
        description="Command translating Hack (<?hh) source on stdin to PHP on stdout",
    )
    extensions: List[str] = Field(default=[".php", ".hh"])
    follow_symlinks: bool = Field(default=False, description="Recurse into symlinked directories")

    def cache_path_for(self, outfile: Path) -> Path:
        """Default cache location: a dotfile beside the output file."""
        return outfile.parent / self.cache_filename
