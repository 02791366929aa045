"""Decoding of ``key: value`` property text into dataclass instances."""

import dataclasses
import io
import math
import re
import sys
from typing import Any, Iterable, Optional, Union

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1


class DecodeError(ValueError):
    """A line of property text could not be decoded."""

    def __init__(self, line: int, reason: str) -> None:
        super().__init__(f"line {line}: {reason}")
        self.line = line
        self.reason = reason


class UpperString(str):
    """A string field that stores its value upper-cased."""

    @classmethod
    def unmarshal_prop(cls, data: str) -> "UpperString":
        return cls(data.upper())


# Field types written as strings (postponed annotations) resolve through this.
_NAMED_TYPES: dict = {
    "int": int,
    "float": float,
    "str": str,
    "bool": bool,
    "UpperString": UpperString,
}


@dataclasses.dataclass(frozen=True)
class _FieldSpec:
    name: str
    type: Any
    unsigned: bool


_cache: dict = {}


def _resolve(tp: Any) -> Any:
    if isinstance(tp, str):
        return _NAMED_TYPES.get(tp, tp)
    return tp


def _field_index(cls: type) -> dict:
    """Map property keys to the dataclass fields they fill, cached per class."""
    cached = _cache.get(cls)
    if cached is not None:
        return cached
    index: dict = {}
    for field in dataclasses.fields(cls):
        if field.name.startswith("_"):
            continue
        key = field.metadata.get("prop") or field.name.lower()
        index[key] = _FieldSpec(
            name=field.name,
            type=_resolve(field.type),
            unsigned=bool(field.metadata.get("unsigned")),
        )
    _cache[cls] = index
    return index


def _parse_int(text: str, unsigned: bool) -> int:
    pattern = _UINT_RE if unsigned else _INT_RE
    if not pattern.fullmatch(text):
        raise ValueError(f'invalid syntax: "{text}"')
    value = int(text)
    low, high = (0, _UINT64_MAX) if unsigned else (_INT64_MIN, _INT64_MAX)
    if not low <= value <= high:
        raise ValueError(f'value out of range: "{text}"')
    return value


def _parse_float(text: str) -> float:
    if "_" in text:
        raise ValueError(f'invalid syntax: "{text}"')
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f'invalid syntax: "{text}"') from None
    if math.isinf(value) and text.lstrip("+-").lower() not in ("inf", "infinity"):
        raise ValueError(f'value out of range: "{text}"')
    return value


def _parse_value(spec: _FieldSpec, text: str) -> Any:
    tp = spec.type
    unmarshal = getattr(tp, "unmarshal_prop", None)
    if callable(unmarshal):
        return unmarshal(text)
    if tp is bool:
        if text == "true":
            return True
        if text == "false":
            return False
        raise ValueError(f"invalid bool: {text}")
    if tp is int:
        return _parse_int(text, spec.unsigned)
    if tp is float:
        return _parse_float(text)
    if tp is str:
        return text
    raise ValueError(f"invalid type: {tp}")


def _as_text(raw: Any) -> str:
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8")
    return raw


class Decoder:
    """Reads property lines from a stream and fills dataclass fields."""

    def __init__(self, stream: Iterable[Any]) -> None:
        self._stream = stream

    def decode(self, target: Any) -> Any:
        """Fill ``target`` from the stream; raise DecodeError on a bad line."""
        if not dataclasses.is_dataclass(target) or isinstance(target, type):
            raise TypeError(f"{type(target).__name__} is not a dataclass instance")
        index = _field_index(type(target))
        for number, raw in enumerate(self._stream, start=1):
            line = _as_text(raw)
            if line.endswith("\n"):
                line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition(":")
            if not sep:
                raise DecodeError(number, "no separator")
            spec = index.get(key)
            if spec is None:
                continue
            try:
                parsed = _parse_value(spec, value.strip())
            except ValueError as exc:
                raise DecodeError(number, str(exc)) from exc
            setattr(target, spec.name, parsed)
        return target


def unmarshal(data: Union[str, bytes], target: Any) -> Any:
    """Decode property text or bytes into ``target``."""
    return Decoder(io.StringIO(_as_text(data))).decode(target)


_SAMPLE = (
    "\n# comment, ignore\nkey1: 10.5\nkey2: some string"
    "\nkey3: 42\nkey4: false\nspecial: another string\n"
)


@dataclasses.dataclass
class _Sample:
    key1: float = 0.0
    key2: str = ""
    key3: int = dataclasses.field(default=0, metadata={"unsigned": True})
    key4: bool = False
    key5: UpperString = dataclasses.field(
        default=UpperString(""), metadata={"prop": "special"}
    )
    _key6: int = 0


def main(argv: Optional[list] = None) -> int:
    """Decode a built-in sample and print the result."""
    sample = _Sample()
    try:
        unmarshal(_SAMPLE, sample)
    except DecodeError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(sample)
    return 0