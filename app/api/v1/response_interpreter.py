import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from app.api.v1.care_utils import (
    build_care_tips,
    coerce_choice,
    detect_issues,
    extract_moisture_level,
    extract_numbered_items,
    extract_watering_frequency,
    infer_light,
    strip_list_marker,
)
from app.schemas.plant_care import (
    DEFAULT_GROWTH_STAGE,
    DEFAULT_INTERESTING_FACTS,
    DEFAULT_NAME,
    DEFAULT_SIZE,
    GROWTH_STAGE_CHOICES,
    MAX_INTERESTING_FACTS,
    SIZE_CHOICES,
    PlantCareRecord,
)

logger = logging.getLogger(__name__)

PARSER_VERSION = "5.0"

# Sections the line cursor can be in
TOP = ""
DESCRIPTION = "description"
CARE = "care"
FACTS = "facts"
HEALTH = "health"

_CARE_ENTRY_RE = re.compile(r"^-\s*([^:]+?)\s*:\s*(.*)$")


@dataclass
class ParseState:
    section: str = TOP
    name: Optional[str] = None
    species: Optional[str] = None
    description: List[str] = field(default_factory=list)
    health: List[str] = field(default_factory=list)
    plant_size: Optional[str] = None
    pot_size: Optional[str] = None
    growth_stage: Optional[str] = None
    moisture: Optional[str] = None
    care: Dict[str, str] = field(default_factory=dict)
    care_labels: Dict[str, str] = field(default_factory=dict)
    facts: List[str] = field(default_factory=list)

    def add_fact(self, line):
        fact = strip_list_marker(line)
        if fact and len(self.facts) < MAX_INTERESTING_FACTS:
            self.facts.append(fact)

    def add_care(self, key, value, label=None):
        if value:
            self.care[key] = value
            if label:
                self.care_labels[key] = label


@dataclass(frozen=True)
class SectionRule:
    """A line prefix and what to do with the text after it."""

    pattern: "re.Pattern"
    apply: Callable[[ParseState, str], None]
    # dash-prefixed care entries are plain facts while collecting facts
    in_facts: bool = True

    def match(self, line):
        m = self.pattern.match(line)
        return m.group(1).strip() if m else None


def _rule(prefix, apply, in_facts=True):
    return SectionRule(re.compile(r"^" + prefix + r"\s*:\s*(.*)$", re.I), apply, in_facts)


# -----------------------------
# Rule handlers
# -----------------------------
def _set_name(state, value):
    state.section = TOP
    state.name = value


def _set_species(state, value):
    state.section = TOP
    state.species = value


def _set_plant_size(state, value):
    state.section = TOP
    state.plant_size = value


def _set_pot_size(state, value):
    state.section = TOP
    state.pot_size = value


def _set_growth_stage(state, value):
    state.section = TOP
    state.growth_stage = value


def _set_moisture(state, value):
    state.section = TOP
    state.moisture = value


def _open_description(state, value):
    state.section = DESCRIPTION
    state.description = [value] if value else []


def _open_care(state, value):
    state.section = CARE


def _care_entry(key):
    def apply(state, value):
        state.section = CARE
        state.add_care(key, value)
    return apply


def _open_facts(state, value):
    state.section = FACTS
    if value:
        state.add_fact(value)


def _open_health(state, value):
    state.section = HEALTH
    state.health = [value] if value else []


# Evaluated top to bottom, first match wins.
SECTION_RULES = [
    _rule(r"plant\s+name", _set_name),
    _rule(r"plant", _set_name),
    _rule(r"species", _set_species),
    _rule(r"plant\s+size", _set_plant_size),
    _rule(r"pot\s+size", _set_pot_size),
    _rule(r"growth\s+stage", _set_growth_stage),
    _rule(r"moisture(?:\s+level)?", _set_moisture),
    _rule(r"description", _open_description),
    _rule(r"care\s+recommendations", _open_care),
    _rule(r"-\s*watering", _care_entry("watering"), in_facts=False),
    _rule(r"-\s*light[^:]*", _care_entry("light"), in_facts=False),
    _rule(r"-\s*temperature", _care_entry("temperature"), in_facts=False),
    _rule(r"-\s*soil", _care_entry("soil"), in_facts=False),
    _rule(r"-\s*fertilizing", _care_entry("fertilizing"), in_facts=False),
    _rule(r"-\s*humidity", _care_entry("humidity"), in_facts=False),
    _rule(r"-\s*growth[^:]*", _care_entry("growth"), in_facts=False),
    _rule(r"-\s*blooming", _care_entry("blooming"), in_facts=False),
    _rule(r"interesting\s+facts", _open_facts),
    _rule(r"health\s+assessment", _open_health),
]


def _normalize_label(label):
    return re.sub(r"\s+", "", label.lower())


def _clean_line(line):
    # models like to bold their labels
    return line.strip().replace("**", "").strip()


class ResponseInterpreter:
    """
    Turns the model's free-text reply into a PlantCareRecord.

    `interpret` never raises: if anything goes wrong the fully defaulted
    record is returned with the raw text as its description.
    """

    version = PARSER_VERSION

    def __init__(self, rules=None, default_facts=DEFAULT_INTERESTING_FACTS):
        self.rules = list(rules) if rules is not None else SECTION_RULES
        self.default_facts = list(default_facts)

    def interpret(self, raw) -> PlantCareRecord:
        text = _as_text(raw)
        try:
            state = self.scan(text)
            return self.build_record(state, text)
        except Exception:
            logger.warning("Could not parse model response, using defaults", exc_info=True)
            return self.fallback_record(text)

    def scan(self, text) -> ParseState:
        state = ParseState()
        for raw_line in text.split("\n"):
            line = _clean_line(raw_line)
            if not line:
                continue
            if self._apply_rules(state, line):
                continue
            self._continue_section(state, line)
        return state

    def _apply_rules(self, state, line):
        for rule in self.rules:
            if state.section == FACTS and not rule.in_facts:
                continue
            value = rule.match(line)
            if value is not None:
                rule.apply(state, value)
                return True
        return False

    def _continue_section(self, state, line):
        if state.section == CARE:
            m = _CARE_ENTRY_RE.match(line)
            if m:
                label = m.group(1).strip()
                state.add_care(_normalize_label(label), m.group(2).strip(), label[:1].upper() + label[1:])
        elif state.section == FACTS:
            state.add_fact(line)
        elif state.section == HEALTH:
            state.health.append(line)
        elif state.section == DESCRIPTION:
            state.description.append(line)

    def build_record(self, state, text) -> PlantCareRecord:
        description = " ".join(state.description)
        health = " ".join(state.health)

        facts = state.facts or extract_numbered_items(text, MAX_INTERESTING_FACTS)
        if not facts:
            facts = list(self.default_facts)

        watering_text = state.care.get("watering") or _lines_mentioning(text, "water")

        return PlantCareRecord(
            general_description=description or health or text,
            name=state.name or DEFAULT_NAME,
            species=state.species or "",
            plant_size=coerce_choice(state.plant_size, SIZE_CHOICES, DEFAULT_SIZE),
            pot_size=coerce_choice(state.pot_size, SIZE_CHOICES, DEFAULT_SIZE),
            growth_stage=coerce_choice(state.growth_stage, GROWTH_STAGE_CHOICES, DEFAULT_GROWTH_STAGE),
            moisture_level=extract_moisture_level(text, state.moisture),
            light=infer_light(state.care.get("light") or text),
            watering_frequency=extract_watering_frequency(watering_text),
            specific_issues=detect_issues(text),
            care_tips=build_care_tips(state.care, text, state.care_labels),
            interesting_facts=facts[:MAX_INTERESTING_FACTS],
        )

    def fallback_record(self, text) -> PlantCareRecord:
        return PlantCareRecord(
            general_description=text,
            interesting_facts=self.default_facts[:MAX_INTERESTING_FACTS],
        )


def _as_text(raw):
    if raw is None:
        return ""
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", errors="replace")
    # lone surrogates (e.g. from a JSON "\ud800" escape) cannot be serialized
    return str(raw).encode("utf-8", errors="replace").decode("utf-8")


def _lines_mentioning(text, word):
    return "\n".join(line for line in text.split("\n") if word in line.lower())


_default_interpreter = ResponseInterpreter()


def interpret_response(raw) -> PlantCareRecord:
    return _default_interpreter.interpret(raw)
