import re

from app.schemas.plant_care import (
    DEFAULT_CARE_TIPS,
    DEFAULT_LIGHT,
    DEFAULT_MOISTURE_LEVEL,
    DEFAULT_WATERING_FREQUENCY,
    NO_ISSUES_DETECTED,
)

# -----------------------------
# Watering cadence rules (first match wins)
# -----------------------------
WATERING_RULES = [
    (("every 3 days", "3 days"), 3),
    (("every 5 days", "5 days"), 5),
    (("every 10 days", "10 days"), 10),
    (("every 14 days", "14 days"), 14),
    (("weekly", "once a week"), 7),
    (("daily", "every day"), 1),
]

# -----------------------------
# Issue keywords (detection order = output order)
# -----------------------------
ISSUE_KEYWORDS = [
    ("Yellowing leaves", ["yellow"]),
    ("Brown spots or edges", ["brown"]),
    ("Wilting or drooping", ["wilt"]),
    ("Underwatering", ["dry", "underwater"]),
    ("Overwatering", ["wet", "overwater"]),
    ("Root rot", ["root rot"]),
]

DRY_KEYWORDS = ["dry", "underwater"]
WET_KEYWORDS = ["wet", "overwater"]
DRY_MOISTURE_LEVEL = "25"
WET_MOISTURE_LEVEL = "75"

# -----------------------------
# Care tips
# -----------------------------
CARE_TIP_ORDER = ["watering", "light", "temperature", "soil", "fertilizing", "humidity"]

CARE_TIP_LABELS = {
    "watering": "Watering",
    "light": "Light",
    "temperature": "Temperature",
    "soil": "Soil",
    "fertilizing": "Fertilizing",
    "humidity": "Humidity",
    "growth": "Growth",
    "blooming": "Blooming",
}

GENERIC_CARE_TIPS = [
    ("water", "Water when the top inch of soil feels dry"),
    ("light", "Give the plant light that suits its species"),
    ("temperature", "Keep the plant away from drafts and sudden temperature changes"),
    ("humidity", "Maintain steady humidity around the plant"),
    ("fertiliz", "Feed with a balanced fertilizer during the growing season"),
]

_PERCENT_RE = re.compile(r"(\d{1,3})\s*%")
_MOISTURE_PERCENT_RE = re.compile(r"moisture[^\d\n]{0,40}?(\d{1,3})\s*%")
_NUMBERED_ITEM_RE = re.compile(r"^[ \t]*\d+\.[ \t]+(.+)$", re.M)
_LIST_MARKER_RE = re.compile(r"^(?:[-*•]\s*|\d+[.)](?=\s)\s*)")
_NEGATED_SUN_RE = re.compile(
    r"\b(?:avoid(?:ing)?|away from|no|not in|out of)\s+(?:the\s+|harsh\s+|hot\s+|strong\s+)*(?:direct|full)\s+sun\w*"
)


def mentions(text, keywords):
    """True when any keyword starts a word in `text` (already lower-cased)."""
    return any(re.search(r"\b" + re.escape(k), text) for k in keywords)


# -----------------------------
# Derived fields
# -----------------------------
def extract_watering_frequency(watering_text):
    if not watering_text:
        return DEFAULT_WATERING_FREQUENCY
    text = watering_text.lower()
    for phrases, days in WATERING_RULES:
        if any(p in text for p in phrases):
            return days
    return DEFAULT_WATERING_FREQUENCY


def _valid_percent(match):
    if match and int(match.group(1)) <= 100:
        return str(int(match.group(1)))
    return None


def extract_moisture_level(text, moisture_text=None):
    """
    Numeric-string convention: an explicit percentage wins, otherwise
    dryness/wetness keywords map to 25/75, otherwise 50.
    """
    lowered = text.lower()
    level = None
    if moisture_text:
        level = _valid_percent(_PERCENT_RE.search(moisture_text))
    if level is None:
        level = _valid_percent(_MOISTURE_PERCENT_RE.search(lowered))
    if level is not None:
        return level

    if mentions(lowered, DRY_KEYWORDS):
        return DRY_MOISTURE_LEVEL
    if mentions(lowered, WET_KEYWORDS):
        return WET_MOISTURE_LEVEL
    return DEFAULT_MOISTURE_LEVEL


def detect_issues(text):
    lowered = text.lower()
    issues = [label for label, keywords in ISSUE_KEYWORDS if mentions(lowered, keywords)]
    return ", ".join(issues) if issues else NO_ISSUES_DETECTED


def infer_light(light_text):
    if not light_text:
        return DEFAULT_LIGHT
    # "keep away from direct sun" is not a request for direct sun
    text = _NEGATED_SUN_RE.sub("", light_text.lower())
    if "indirect" in text:
        return "Bright indirect light"
    if "low light" in text or "shade" in text:
        return "Low light"
    if "direct sun" in text or "full sun" in text:
        return "Direct sunlight"
    return DEFAULT_LIGHT


def coerce_choice(value, choices, default):
    """Return the first member of `choices` named as a word in `value`."""
    if not value:
        return default
    lowered = value.lower()
    for choice in choices:
        if re.search(r"\b" + re.escape(choice.lower()) + r"\b", lowered):
            return choice
    return default


# -----------------------------
# Care tips
# -----------------------------
def format_care_tips(care, labels=None):
    """
    `care` maps normalized label -> value. Known keys come first in a fixed
    order, then anything else in the order it was captured.
    """
    labels = labels or {}
    keys = [k for k in CARE_TIP_ORDER if care.get(k)]
    keys += [k for k in care if k not in CARE_TIP_ORDER and care.get(k)]

    tips = []
    for key in keys:
        label = CARE_TIP_LABELS.get(key) or labels.get(key) or key.capitalize()
        tips.append(f"{label}: {care[key]}")
    return "\n".join(tips)


def generic_care_tips(text):
    lowered = text.lower()
    tips = [tip for keyword, tip in GENERIC_CARE_TIPS if keyword in lowered]
    return ". ".join(tips)


def build_care_tips(care, text, labels=None):
    return format_care_tips(care, labels) or generic_care_tips(text) or DEFAULT_CARE_TIPS


# -----------------------------
# Interesting facts
# -----------------------------
def strip_list_marker(line):
    return _LIST_MARKER_RE.sub("", line, count=1).strip()


def extract_numbered_items(text, limit=4):
    items = [m.strip() for m in _NUMBERED_ITEM_RE.findall(text)]
    return [i for i in items if i][:limit]
