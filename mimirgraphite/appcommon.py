"""Application configuration flags and resource lifecycle."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

DEFAULT_INSTRUMENT_BUCKETS = ".005,.010,.015,.020,.025,.050,.100,.250,.500,1,2.5,5,10"

_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_WORDS = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise argparse.ArgumentTypeError(f'parsing "{text}": invalid syntax')


class _ConfigAction(argparse.Action):
    """Stores the parsed value both in the namespace and on a config object."""

    def __init__(self, option_strings, dest, *, config: Any, attribute: str, **kwargs) -> None:
        super().__init__(option_strings, dest, **kwargs)
        self._config = config
        self._attribute = attribute

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        setattr(namespace, self.dest, values)
        setattr(self._config, self._attribute, values)


@dataclass
class Config:
    """Settings shared by every application built on this harness."""

    instrument_buckets: str = ""
    enable_auth: bool = False
    service_name: str = ""

    def register_flags(self, parser: argparse.ArgumentParser) -> None:
        """Add this config's flags to ``parser``."""
        self.register_flags_with_prefix("", parser)

    def register_flags_with_prefix(self, prefix: str, parser: argparse.ArgumentParser) -> None:
        """Add this config's flags to ``parser``, each name preceded by ``prefix``.

        A non-empty prefix not ending with '.' gets one appended. Registering
        resets the fields to the flag defaults.
        """
        if prefix and not prefix.endswith("."):
            prefix += "."

        self.instrument_buckets = DEFAULT_INSTRUMENT_BUCKETS
        parser.add_argument(
            f"--{prefix}instrument-buckets",
            dest=f"{prefix}instrument_buckets",
            default=DEFAULT_INSTRUMENT_BUCKETS,
            action=_ConfigAction,
            config=self,
            attribute="instrument_buckets",
            help="Buckets for instrumentation, comma separated list of seconds as floats.",
        )

        self.enable_auth = True
        parser.add_argument(
            f"--{prefix}auth.enable",
            dest=f"{prefix}auth_enable",
            default=True,
            nargs="?",
            const=True,
            type=_parse_bool,
            action=_ConfigAction,
            config=self,
            attribute="enable_auth",
            help="require X-Scope-OrgId header",
        )

        self.service_name = ""
        parser.add_argument(
            f"--{prefix}service-name",
            dest=f"{prefix}service_name",
            default="",
            action=_ConfigAction,
            config=self,
            attribute="service_name",
            help="the service name used in traces",
        )


class AppError(Exception):
    """Collects every failure raised while closing an application."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: List[BaseException] = list(errors)
        super().__init__(*self.errors)

    def __str__(self) -> str:
        return ", ".join(f"error {n}: {err}" for n, err in enumerate(self.errors, start=1))


class App:
    """Owns resources that must be released when the application stops."""

    def __init__(self, closers: Optional[Iterable[Callable[[], Any]]] = None) -> None:
        self._closers: List[Callable[[], Any]] = list(closers or [])

    def close(self) -> None:
        """Run every closer, raising :class:`AppError` if any of them failed."""
        errors = []
        for closer in self._closers:
            try:
                closer()
            except Exception as exc:  # noqa: BLE001 - every failure is reported
                errors.append(exc)
        if errors:
            raise AppError(errors)

    def __enter__(self) -> "App":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _parse_float(text: str) -> float:
    invalid = ValueError(f'strconv.ParseFloat: parsing "{text}": invalid syntax')
    if text != text.strip() or "_" in text:
        raise invalid
    try:
        return float(text)
    except ValueError:
        raise invalid from None


def parse_floats(text: str) -> List[float]:
    """Parse a comma separated list of floats."""
    if not text:
        raise ValueError("empty string")
    values = []
    for index, part in enumerate(text.split(",")):
        try:
            values.append(_parse_float(part))
        except ValueError as exc:
            raise ValueError(f"can't parse value {index}: {exc}") from exc
    return values