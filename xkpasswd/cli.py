"""
Command-line interface and high-level generator functions.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from loguru import logger

from .config import PasswordConfig
from .errors import ConfigValidationError, EntropyWarning, XKPasswdError
from .generator import PasswordStats, XKPasswd
from .presets import defined_presets, preset_description
from .rng import RNG, BasicRNG, SystemRNG
from .settings import Settings, configure_logging


@dataclass
class GenerationMeta:
    """
    Full result of one password generation.
    """

    password: str
    config: PasswordConfig
    stats: PasswordStats
    entropy_warnings: list[EntropyWarning]


def generate_password_with_meta(**kwargs: Any) -> GenerationMeta:
    """
    Build a throwaway generator from the XKPasswd keyword arguments and
    produce one password along with:

    - the config it was made with
    - the statistics for that config + dictionary
    - any low-entropy warnings
    """
    generator = XKPasswd(**kwargs)
    password = generator.password()
    return GenerationMeta(
        password=password,
        config=generator.config,
        stats=generator.stats(),
        entropy_warnings=list(generator.entropy_warnings),
    )


def generate_password(**kwargs: Any) -> str:
    """One password with no instance to manage, e.g. generate_password(preset="XKCD")."""
    return generate_password_with_meta(**kwargs).password


# --- command line ---


def _make_rng(name: str) -> RNG:
    if name == "basic":
        return BasicRNG()
    if name == "quantum":
        # qiskit is slow to import, only load it on request
        from .quantum_engine import QuantumRNG

        return QuantumRNG()
    return SystemRNG()


def _parse_overrides(text: str | None) -> dict[str, Any] | None:
    if text is None:
        return None
    try:
        overrides = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigValidationError(f"failed to parse overrides: {exc}") from exc
    if not isinstance(overrides, dict):
        raise ConfigValidationError("overrides must be a JSON object of key/value pairs")
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xkpasswd",
        description="Generate memorable passwords from random dictionary words.",
    )
    parser.add_argument("-p", "--preset", help="named preset to start from (default: DEFAULT)")
    parser.add_argument("-o", "--overrides", help="JSON object of config keys applied on top of the preset")
    parser.add_argument("-c", "--config-file", type=Path, help="JSON config file (takes precedence over --preset)")
    parser.add_argument("-d", "--dict-file", type=Path, help="word file, one word per line")
    parser.add_argument("--encoding", default="utf-8", help="encoding of --dict-file (default: utf-8)")
    parser.add_argument(
        "-r",
        "--rng",
        choices=("system", "basic", "quantum"),
        default="system",
        help="random number source (default: system)",
    )
    parser.add_argument("-n", "--count", type=int, default=1, help="number of passwords to generate")
    parser.add_argument("--json", action="store_true", help="print passwords and entropy stats as JSON")
    parser.add_argument("--stats", action="store_true", help="print statistics after the passwords")
    parser.add_argument("--status", action="store_true", help="print a full status report after the passwords")
    parser.add_argument("--list-presets", action="store_true", help="list the presets and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Entry point for `xkpasswd`, `python -m xkpasswd` or `run_xkpasswd.py`.
    """
    args = build_parser().parse_args(argv)

    settings = Settings()
    if args.verbose:
        settings = settings.model_copy(update={"debug": True})
    configure_logging(settings)

    if args.list_presets:
        for name in defined_presets():
            print(f"{name}: {preset_description(name)}")
        return 0

    if args.count < 1:
        print("xkpasswd: error: --count must be at least 1", file=sys.stderr)
        return 1

    try:
        kwargs: dict[str, Any] = {"settings": settings, "rng": _make_rng(args.rng)}
        if args.config_file is not None:
            try:
                kwargs["config_json"] = args.config_file.read_text(encoding="utf-8")
            except OSError as exc:
                raise ConfigValidationError(f"failed to read config file: {exc}") from exc
        else:
            kwargs["preset"] = args.preset
            kwargs["preset_overrides"] = _parse_overrides(args.overrides)
        if args.dict_file is not None:
            kwargs["dictionary_file"] = args.dict_file
            kwargs["dictionary_file_encoding"] = args.encoding

        generator = XKPasswd(**kwargs)

        if args.json:
            print(generator.passwords_json(args.count))
        else:
            for password in generator.passwords(args.count):
                print(password)

        if args.stats:
            for key, value in generator.stats().to_dict().items():
                print(f"{key}: {value}")
        if args.status:
            print(generator.status(), end="")
    except XKPasswdError as exc:
        logger.debug(f"{type(exc).__name__}: {exc}")
        print(f"xkpasswd: error: {exc}", file=sys.stderr)
        return 1

    return 0
