"""
Purpose category and person catalogs.

The engine only ever reads from the catalog. Adding entries is a separate
capability handed to the creation flows.
"""

import logging
import re
import time
from typing import Dict, List, Optional
from ..errors import CatalogError
from ..models import ExtraInfoType
from ..schemas import ColorScheme, PurposeCategory, PurposeCreate, Person

logger = logging.getLogger(__name__)

COLOR_PALETTE: List[ColorScheme] = [
    ColorScheme(bg="bg-purple-100", border="border-purple-400", text="text-purple-800"),
    ColorScheme(bg="bg-blue-100", border="border-blue-400", text="text-blue-800"),
    ColorScheme(bg="bg-green-100", border="border-green-400", text="text-green-800"),
    ColorScheme(bg="bg-yellow-100", border="border-yellow-400", text="text-yellow-800"),
    ColorScheme(bg="bg-red-100", border="border-red-400", text="text-red-800"),
    ColorScheme(bg="bg-indigo-100", border="border-indigo-400", text="text-indigo-800"),
    ColorScheme(bg="bg-pink-100", border="border-pink-400", text="text-pink-800"),
    ColorScheme(bg="bg-teal-100", border="border-teal-400", text="text-teal-800"),
]

# Styling for records whose purpose is no longer in the catalog
DEFAULT_COLOR = ColorScheme(bg="bg-slate-100", border="border-slate-400", text="text-slate-800")

DEFAULT_PURPOSE_CATEGORIES: List[PurposeCategory] = [
    PurposeCategory(id="bau_team_support", label="BAU / Team Support", color=COLOR_PALETTE[0]),
    PurposeCategory(id="bigger_picture_strategy", label="Bigger Picture / Strategy", color=COLOR_PALETTE[1]),
    PurposeCategory(id="other_dept_support", label="Other Dept Support", extra_info_type=ExtraInfoType.PERSON,
                    extra_info_prompt="Who was it for?", color=COLOR_PALETTE[2]),
    PurposeCategory(id="meeting", label="Meeting", extra_info_type=ExtraInfoType.PERSON,
                    extra_info_prompt="Who set the meeting?", color=COLOR_PALETTE[3], is_meeting=True),
]

DEFAULT_PEOPLE: List[Person] = [
    Person(id="alan_f", name="Alan F"),
    Person(id="daz_f", name="Daz F"),
    Person(id="roxy", name="Roxy"),
    Person(id="michelle", name="Michelle"),
    Person(id="lee", name="Lee"),
    Person(id="laura", name="Laura"),
    Person(id="adam_me", name="Adam (me)"),
]


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")


class CatalogService:
    """Ordered purpose and person catalogs with id lookups."""

    def __init__(self, purposes: Optional[List[PurposeCategory]] = None, people: Optional[List[Person]] = None):
        self._purposes: List[PurposeCategory] = []
        self._people: List[Person] = []
        self.load(purposes, people)

    def load(self, purposes: Optional[List[PurposeCategory]], people: Optional[List[Person]]):
        """Replace both catalogs, falling back to the defaults when a list is empty."""
        self._purposes = list(purposes) if purposes else [p.model_copy() for p in DEFAULT_PURPOSE_CATEGORIES]
        self._people = list(people) if people else [p.model_copy() for p in DEFAULT_PEOPLE]

    # Read-only side

    @property
    def purposes(self) -> List[PurposeCategory]:
        return list(self._purposes)

    @property
    def people(self) -> List[Person]:
        return list(self._people)

    def purpose_map(self) -> Dict[str, PurposeCategory]:
        return {purpose.id: purpose for purpose in self._purposes}

    def person_map(self) -> Dict[str, Person]:
        return {person.id: person for person in self._people}

    def purpose(self, purpose_id: str) -> Optional[PurposeCategory]:
        return self.purpose_map().get(purpose_id)

    def person(self, person_id: Optional[str]) -> Optional[Person]:
        if not person_id:
            return None
        return self.person_map().get(person_id)

    def color_for(self, purpose_id: str) -> ColorScheme:
        purpose = self.purpose(purpose_id)
        return purpose.color if purpose else DEFAULT_COLOR

    def snapshot(self) -> dict:
        return {
            "purpose_categories": [purpose.model_dump(mode="json") for purpose in self._purposes],
            "people": [person.model_dump(mode="json") for person in self._people],
        }

    # Write capability, injected into the creation flows

    def add_purpose(self, purpose_in: PurposeCreate) -> PurposeCategory:
        label = purpose_in.label.strip()
        if not label:
            raise CatalogError("Purpose name is required.")
        prompt = purpose_in.extra_info_prompt.strip()
        if purpose_in.extra_info_type != ExtraInfoType.NONE and not prompt:
            raise CatalogError("Question to ask is required.")

        purpose = PurposeCategory(
            id=f"{slugify(label)}_{int(time.time() * 1000)}",
            label=label,
            extra_info_type=purpose_in.extra_info_type,
            extra_info_prompt=prompt if purpose_in.extra_info_type != ExtraInfoType.NONE else "",
            color=COLOR_PALETTE[len(self._purposes) % len(COLOR_PALETTE)],
            is_meeting=purpose_in.is_meeting,
        )
        self._purposes.append(purpose)
        logger.info(f"Added purpose category '{purpose.label}' ({purpose.id})")
        return purpose

    def add_person(self, name: str) -> Person:
        name = name.strip()
        if not name:
            raise CatalogError("Person's name is required.")
        person = Person(id=f"{slugify(name)}_{int(time.time() * 1000)}", name=name)
        self._people.append(person)
        logger.info(f"Added person '{person.name}' ({person.id})")
        return person
