"""Read and write exported scenario files.

The file layout is the JSON export of the interactive calculator::

    {"_format": "rent-vs-buy-analysis-v2",
     "globalSettings": {...}, "rentSettings": {...},
     "profiles": [{...}, ...], "exportedAt": "2024-05-01T12:00:00Z"}

Keys inside each section are camelCase versions of the dataclass fields.
Presentation-only keys such as ``color`` are ignored.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, TypeVar, Union

from .config import DEFAULT_PROFILE_ID, DEFAULT_PROFILE_NAME, SCENARIO_FORMAT
from .schemas import BuyProfile, GlobalSettings, RentSettings

T = TypeVar("T")

_INT_FIELDS = {"forecast_years"}
_STR_FIELDS = {"id", "name"}


class ScenarioFileError(ValueError):
    """The scenario file is unreadable or structurally invalid."""


@dataclass(frozen=True)
class Scenario:
    global_settings: GlobalSettings
    rent_settings: RentSettings
    profiles: Tuple[BuyProfile, ...]
    format_tag: str = SCENARIO_FORMAT
    exported_at: Optional[str] = None

    def profile(self, profile_id: str) -> BuyProfile:
        for candidate in self.profiles:
            if candidate.id == profile_id:
                return candidate
        raise KeyError(profile_id)


def default_scenario() -> Scenario:
    return Scenario(
        global_settings=GlobalSettings(),
        rent_settings=RentSettings(),
        profiles=(BuyProfile(id=DEFAULT_PROFILE_ID, name=DEFAULT_PROFILE_NAME),),
    )


def load_scenario(path: Union[str, Path]) -> Scenario:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ScenarioFileError(f"Could not read scenario file {path}: {exc}") from exc
    return parse_scenario(text)


def parse_scenario(text: str) -> Scenario:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ScenarioFileError(f"Scenario file is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ScenarioFileError("Scenario file must contain a JSON object")

    global_settings = _build(GlobalSettings, _section(payload, "globalSettings"))
    rent_settings = _build(RentSettings, _section(payload, "rentSettings"))

    raw_profiles = payload.get("profiles")
    if not isinstance(raw_profiles, list) or not raw_profiles:
        raise ScenarioFileError("'profiles' must be a non-empty list")
    profiles = []
    seen = set()
    for index, raw in enumerate(raw_profiles):
        if not isinstance(raw, dict):
            raise ScenarioFileError(f"profiles[{index}] must be an object")
        profile = _build(BuyProfile, raw)
        if profile.id in seen:
            raise ScenarioFileError(f"Duplicate profile id '{profile.id}'")
        seen.add(profile.id)
        profiles.append(profile)

    return Scenario(
        global_settings=global_settings,
        rent_settings=rent_settings,
        profiles=tuple(profiles),
        format_tag=str(payload.get("_format", SCENARIO_FORMAT)),
        exported_at=payload.get("exportedAt"),
    )


def dump_scenario(scenario: Scenario, *, exported_at: Optional[datetime] = None) -> str:
    stamp = exported_at or datetime.now(timezone.utc)
    payload = {
        "_format": scenario.format_tag,
        "globalSettings": _camel_dict(scenario.global_settings),
        "rentSettings": _camel_dict(scenario.rent_settings),
        "profiles": [_camel_dict(p) for p in scenario.profiles],
        "exportedAt": stamp.isoformat(),
    }
    return json.dumps(payload, indent=2)


def save_scenario(scenario: Scenario, path: Union[str, Path]) -> None:
    try:
        Path(path).write_text(dump_scenario(scenario), encoding="utf-8")
    except OSError as exc:
        raise ScenarioFileError(f"Could not write scenario file {path}: {exc}") from exc


def _section(payload: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = payload.get(key)
    if not isinstance(section, dict):
        raise ScenarioFileError(f"'{key}' section is missing or not an object")
    return section


def _build(cls: Type[T], raw: Dict[str, Any]) -> T:
    known = {f.name for f in fields(cls)}
    kwargs: Dict[str, Any] = {}
    for key, value in raw.items():
        name = _to_snake(key)
        if name not in known:
            continue
        kwargs[name] = _coerce(cls.__name__, name, value)
    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as exc:
        raise ScenarioFileError(f"{cls.__name__}: {exc}") from exc


def _coerce(owner: str, name: str, value: Any) -> Any:
    if name in _STR_FIELDS:
        if not isinstance(value, (str, int)) or isinstance(value, bool):
            raise ScenarioFileError(f"{owner}.{name} must be a string")
        return str(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScenarioFileError(f"{owner}.{name} must be a number, got {value!r}")
    if name in _INT_FIELDS:
        if isinstance(value, float) and not value.is_integer():
            raise ScenarioFileError(f"{owner}.{name} must be a whole number")
        return int(value)
    return float(value)


def _camel_dict(obj: Any) -> Dict[str, Any]:
    return {_to_camel(key): value for key, value in asdict(obj).items()}


def _to_snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)
