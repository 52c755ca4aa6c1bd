import re
from dataclasses import dataclass

TAG_PATTERN = re.compile(r"SRS_(?P<component>[A-Za-z0-9_]+?)_(?P<major>\d+)_(?P<minor>\d+)")


@dataclass(frozen=True)
class RequirementTag:
    """Parsed form of SRS_<COMPONENT>_<DIGITS>_<DIGITS>"""

    component: str
    major: str
    minor: str

    def __str__(self) -> str:
        return f"SRS_{self.component}_{self.major}_{self.minor}"


def parse_tag(text: str) -> RequirementTag | None:
    match = TAG_PATTERN.fullmatch(text)
    if not match:
        return None
    return RequirementTag(match["component"], match["major"], match["minor"])


def is_valid_tag(text: str) -> bool:
    return parse_tag(text) is not None
