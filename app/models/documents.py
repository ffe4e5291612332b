# app/models/documents.py
"""Schemas and descriptors for the four café documents.

Each document type knows its filename, its pydantic schema and (for list
documents) which key holds the items. Validation errors are reported as a
single human-readable line, which is what the API and the admin editor show.
"""
import re
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, ValidationError

FILENAME_PATTERN = re.compile(r"[a-zA-Z0-9_-]+\.json")

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _require_integer(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("must be an integer")
    return value


def _require_number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("must be a number")
    return value


ItemId = Annotated[int, Field(gt=0), BeforeValidator(_require_integer)]
Price = Annotated[float, Field(gt=0, allow_inf_nan=False), BeforeValidator(_require_number)]
Text = Annotated[str, Field(min_length=1, pattern=r"\S")]


class DocumentModel(BaseModel):
    # Documents are stored exactly as submitted, unknown keys included
    model_config = ConfigDict(extra="allow")


# ---------- Menu ----------

class MenuItem(DocumentModel):
    id: ItemId
    name: Text
    category: Text
    price: Price
    description: Text
    image: Text


class Menu(DocumentModel):
    categories: List[str]
    items: List[MenuItem]


# ---------- Specials ----------

class Special(DocumentModel):
    id: ItemId
    day: Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    name: Text
    items: Text
    price: Price
    discount: Text
    description: Text


class Specials(DocumentModel):
    specials: List[Special]


# ---------- Events ----------

class Event(DocumentModel):
    id: ItemId
    name: Text
    date: Text
    description: Text
    image: Text
    tag: Text
    featured: bool = False


class Events(DocumentModel):
    events: List[Event]


# ---------- Contact ----------

class WorkingHours(DocumentModel):
    weekdays: Text
    weekends: Text


class SocialMedia(DocumentModel):
    facebook: Text
    instagram: Text
    twitter: Text
    tripadvisor: Text


class Contact(DocumentModel):
    address: Text
    phone: Text
    email: EmailStr
    workingHours: WorkingHours
    socialMedia: SocialMedia


# ---------- Descriptors ----------

def _format_loc(loc) -> str:
    return ".".join(str(part) for part in loc)


@dataclass(frozen=True)
class DocumentType:
    key: str
    schema: Type[DocumentModel]
    default_message: str
    items_key: Optional[str] = None
    item_message: str = ""
    # Messages for a top-level field that is missing or malformed
    field_messages: Dict[str, str] = field(default_factory=dict)
    # Messages for problems inside a nested object
    nested_messages: Dict[str, str] = field(default_factory=dict)

    @property
    def filename(self) -> str:
        return f"{self.key}.json"

    @property
    def has_items(self) -> bool:
        return self.items_key is not None

    def items(self, document: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Return the (mutable) item list of a list document"""
        if not self.has_items:
            raise TypeError(f"{self.filename} has no item array")
        items = document.get(self.items_key) if isinstance(document, dict) else None
        if not isinstance(items, list):
            raise TypeError(f"{self.filename} is missing its {self.items_key} array")
        return items

    def _describe(self, error: Dict[str, Any]) -> str:
        loc = tuple(error.get("loc", ()))
        if not loc:
            return f"{self.default_message} ({error['msg']})"
        head = loc[0]
        if len(loc) > 1 and head == self.items_key:
            message = self.item_message
        elif len(loc) > 1 and head in self.nested_messages:
            message = self.nested_messages[head]
        else:
            message = self.field_messages.get(head, self.default_message)
        return f"{message} ({_format_loc(loc)}: {error['msg']})"

    def validation_error(self, document: Any) -> Optional[str]:
        """Return a description of the first problem, or None if the document is valid"""
        try:
            self.schema.model_validate(document)
        except ValidationError as e:
            return self._describe(e.errors()[0])

        if self.has_items:
            seen = set()
            for item in document[self.items_key]:
                if item["id"] in seen:
                    return f"Duplicate id {item['id']} in {self.items_key}"
                seen.add(item["id"])
        return None


MENU = DocumentType(
    key="menu",
    schema=Menu,
    items_key="items",
    default_message="Menu data must have a categories array and an items array",
    item_message="Each menu item must have id, name, category, price, description, and image",
    field_messages={
        "categories": "Menu data must have a categories array",
        "items": "Menu data must have an items array",
    },
)

SPECIALS = DocumentType(
    key="specials",
    schema=Specials,
    items_key="specials",
    default_message="Specials data must have a specials array",
    item_message="Each special must have id, day, name, items, price, discount, and description",
)

EVENTS = DocumentType(
    key="events",
    schema=Events,
    items_key="events",
    default_message="Events data must have an events array",
    item_message="Each event must have id, name, date, description, image, and tag",
)

CONTACT = DocumentType(
    key="contact",
    schema=Contact,
    default_message="Contact data must have address, phone, email, workingHours, and socialMedia",
    nested_messages={
        "workingHours": "Contact data must have weekdays and weekends in workingHours",
        "socialMedia": "Contact data must have all social media links",
    },
)

DOCUMENT_TYPES = (MENU, SPECIALS, EVENTS, CONTACT)

_BY_FILENAME = {doc_type.filename: doc_type for doc_type in DOCUMENT_TYPES}


def is_valid_filename(filename: str) -> bool:
    return isinstance(filename, str) and FILENAME_PATTERN.fullmatch(filename) is not None


def get_document_type(filename: str) -> Optional[DocumentType]:
    """Look up the descriptor for a filename; unknown files have none"""
    return _BY_FILENAME.get(filename)


def next_item_id(items: List[Dict[str, Any]]) -> int:
    """Next free id: one more than the largest existing id"""
    ids = [item["id"] for item in items if isinstance(item.get("id"), int)]
    return max(ids) + 1 if ids else 1


__all__ = [
    "MenuItem", "Menu", "Special", "Specials", "Event", "Events",
    "WorkingHours", "SocialMedia", "Contact",
    "DocumentType", "MENU", "SPECIALS", "EVENTS", "CONTACT", "DOCUMENT_TYPES",
    "WEEKDAYS", "FILENAME_PATTERN", "is_valid_filename", "get_document_type", "next_item_id",
]
