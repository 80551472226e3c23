"""Rendering of the PHP autoload file."""

import string
from pathlib import Path
from typing import Dict, List, Mapping, Union

from .models import AggregatedModel, GeneratorOptions
from .paths import relativize

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def php_lower(value: str) -> str:
    """Lowercase like PHP's strtolower(), which only maps ASCII letters."""
    return value.translate(_ASCII_LOWER)


def php_string(value: str) -> str:
    """Single-quoted PHP string literal, as var_export() writes it."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def php_bool(value: bool) -> str:
    return "true" if value else "false"


def php_array(items: Mapping[str, str]) -> str:
    """A string => string array in var_export() layout."""
    lines = ["array ("]
    for key, value in items.items():
        lines.append(f"  {php_string(key)} => {php_string(value)},")
    lines.append(")")
    return "\n".join(lines)


def build_class_map(
    model: AggregatedModel,
    base: Union[str, Path],
    case_insensitive: bool = False,
) -> Dict[str, str]:
    """Class name to relative path, sorted by name."""
    class_map: Dict[str, str] = {}
    for name, path in model.class_map.items():
        if case_insensitive:
            name = php_lower(name)
        class_map[name] = relativize(path, base)
    return {name: class_map[name] for name in sorted(class_map)}


def build_eager_files(model: AggregatedModel, base: Union[str, Path]) -> List[str]:
    """Relative paths of files that must always be loaded, sorted."""
    return sorted({relativize(path, base) for path in model.eager_files})


def _class_autoload(class_map: Mapping[str, str], options: GeneratorOptions) -> str:
    method = options.require_method.value
    php = (
        "spl_autoload_register(function ($class) {\n"
        f"    static $map = {php_array(class_map)};\n"
        "\n"
    )
    if options.case_insensitive:
        php += "    $class = strtolower($class);\n\n"
    php += (
        "    if (isset($map[$class])) {\n"
        f'        {method} __DIR__ . "/{{$map[$class]}}";\n'
        "    }\n"
        f"}}, true, {php_bool(options.prepend_autoload)});\n"
    )
    return php


def _required_files(eager_files: List[str], options: GeneratorOptions) -> str:
    method = options.require_method.value
    return "".join(f"{method} __DIR__ . {php_string('/' + path)};\n" for path in eager_files)


def generate(model: AggregatedModel, base: Union[str, Path], options: GeneratorOptions) -> str:
    """Render the autoload file for ``model``.

    ``base`` is the directory the file will live in; all paths are written
    relative to it. The output depends only on the arguments, so an
    unchanged source tree regenerates byte for byte.
    """
    class_map = build_class_map(model, base, options.case_insensitive)
    eager_files = build_eager_files(model, base)

    autoload = _class_autoload(class_map, options)
    required = _required_files(eager_files, options)
    generated_by = " ".join(options.generated_by.splitlines())

    return (
        "<?php\n"
        "\n"
        f"// !! Generated by: {generated_by}\n"
        "\n"
        f"{autoload}\n"
        f"{required}\n"
    )
