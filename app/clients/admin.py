# app/clients/admin.py
"""Admin panel controller.

One ``AdminController`` is created per panel and handed to whatever draws the
forms and tables. It keeps the loaded documents in ``current_data`` and one
``EntityEditor`` per item type, so editing a menu item never affects the
specials or events forms.

Local documents are only replaced after the server has confirmed a write.
"""
import copy
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from app.clients.data_api import DataAPI, DataAPIError
from app.clients.notifications import Notifier
from app.models.documents import (
    CONTACT,
    DOCUMENT_TYPES,
    EVENTS,
    MENU,
    SPECIALS,
    DocumentType,
    get_document_type,
    next_item_id,
)

logger = logging.getLogger(__name__)


class EditState(str, Enum):
    IDLE = "idle"
    CREATING = "creating"
    EDITING = "editing"
    SUBMITTED = "submitted"


@dataclass
class EntityEditor:
    doc_type: DocumentType
    label: str
    state: EditState = EditState.IDLE
    editing_id: Optional[int] = None
    form: Dict[str, Any] = field(default_factory=dict)
    _resume_state: EditState = EditState.IDLE

    @property
    def submit_label(self) -> str:
        noun = self.label.split()[-1].capitalize()
        return f"Update {noun}" if self.editing_id is not None else f"Save {noun}"

    def edit(self, item: Dict[str, Any]):
        self.state = EditState.EDITING
        self.editing_id = item["id"]
        self.form = copy.deepcopy(item)

    def submit(self):
        if self.state is EditState.IDLE:
            self.state = EditState.CREATING
        self._resume_state = self.state
        self.state = EditState.SUBMITTED

    def fail(self):
        self.state = self._resume_state

    def reset(self):
        self.state = EditState.IDLE
        self.editing_id = None
        self.form = {}


@dataclass
class TableView:
    title: str
    columns: List[str]
    rows: List[Dict[str, Any]]

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def heading(self) -> str:
        return f"{self.title} ({self.total} total)"


def always_confirm(message: str) -> bool:
    return True


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    return str(value).strip() if value is not None else ""


def _price(form: Mapping[str, Any], key: str = "price") -> Optional[float]:
    value = form.get(key)
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _short(text: Any, length: int = 50) -> str:
    text = str(text)
    return text if len(text) <= length else f"{text[:length]}..."


def _image_name(path: Any) -> str:
    return str(path).rstrip("/").split("/")[-1]


class AdminController:
    def __init__(
        self,
        api: DataAPI,
        notifier: Optional[Notifier] = None,
        confirm: Callable[[str], bool] = always_confirm,
    ):
        self.api = api
        self.notifier = notifier or api.notifier
        self.confirm = confirm
        self.current_data: Dict[str, Optional[Any]] = {doc_type.key: None for doc_type in DOCUMENT_TYPES}
        self.menu_editor = EntityEditor(MENU, "menu item")
        self.special_editor = EntityEditor(SPECIALS, "special")
        self.event_editor = EntityEditor(EVENTS, "event")
        self.tables: Dict[str, TableView] = {}
        self.contact_form: Dict[str, str] = {}
        self.json_status: str = ""

    def show_toast(self, message: str, kind: str = "success"):
        self.notifier.show(message, kind)

    # ==================== LOADING ====================

    async def start(self):
        logger.info("Initializing admin panel...")
        if not await self.api.check_health():
            self.show_toast("Server connection failed. Working in offline mode.", "warning")
        await self.load_all_data()
        self.show_toast("Admin panel ready!")

    async def load_all_data(self):
        try:
            data = await self.api.fetch_all()
        except DataAPIError as e:
            logger.error(f"Error loading data: {e.message}")
            await self.load_data_individually()
        else:
            for doc_type in DOCUMENT_TYPES:
                self.current_data[doc_type.key] = data.get(doc_type.key)
        self.refresh_all_sections()

    async def load_data_individually(self):
        for doc_type in DOCUMENT_TYPES:
            data = await self.api.fetch_data(doc_type.filename)
            if data is not None:
                self.current_data[doc_type.key] = data

    async def refresh_data(self):
        await self.api.clear_cache()
        await self.load_data_individually()
        self.refresh_all_sections()
        self.show_toast("Data refreshed!")

    def refresh_all_sections(self):
        for doc_type in DOCUMENT_TYPES:
            self.refresh_section(doc_type.key)

    def refresh_section(self, key: str):
        renderers = {
            MENU.key: self.render_menu_table,
            SPECIALS.key: self.render_specials_table,
            EVENTS.key: self.render_events_table,
            CONTACT.key: self.load_contact_form,
        }
        render = renderers.get(key)
        if render is None:
            return None
        try:
            return render()
        except (TypeError, KeyError, ValueError, AttributeError) as e:
            # A malformed document only blanks its own section
            logger.error(f"Error rendering {key}: {str(e)}")
            self.tables.pop(key, None)
            self.show_toast(f"Could not display {key} data", "error")
            return None

    # ==================== TABLES ====================

    def _items(self, doc_type: DocumentType) -> Optional[List[Dict[str, Any]]]:
        document = self.current_data.get(doc_type.key)
        if document is None:
            return None
        return doc_type.items(document)

    def render_menu_table(self) -> Optional[TableView]:
        items = self._items(MENU)
        if items is None:
            return None
        rows = [
            {
                "id": item["id"],
                "name": item["name"],
                "category": item["category"],
                "price": f"${item['price']:.2f}",
                "description": _short(item["description"]),
                "image": _image_name(item["image"]),
            }
            for item in items
        ]
        table = TableView("Menu Items", ["ID", "Name", "Category", "Price", "Description", "Image"], rows)
        self.tables[MENU.key] = table
        return table

    def render_specials_table(self) -> Optional[TableView]:
        specials = self._items(SPECIALS)
        if specials is None:
            return None
        rows = [
            {
                "id": special["id"],
                "day": special["day"],
                "name": special["name"],
                "items": special["items"],
                "price": f"${special['price']:.2f}",
                "discount": special["discount"],
            }
            for special in specials
        ]
        table = TableView("Daily Specials", ["Day", "Combo Name", "Items", "Price", "Discount"], rows)
        self.tables[SPECIALS.key] = table
        return table

    def render_events_table(self) -> Optional[TableView]:
        events = self._items(EVENTS)
        if events is None:
            return None
        rows = [
            {
                "id": event["id"],
                "name": event["name"],
                "date": event["date"],
                "description": _short(event["description"]),
                "tag": event["tag"],
                "image": _image_name(event["image"]),
                "featured": bool(event.get("featured", False)),
            }
            for event in events
        ]
        table = TableView("Events", ["Name", "Date/Time", "Description", "Tag", "Image"], rows)
        self.tables[EVENTS.key] = table
        return table

    # ==================== ITEM EDITING ====================

    def _edit(self, editor: EntityEditor, item_id: int) -> Optional[Dict[str, Any]]:
        try:
            items = self._items(editor.doc_type) or []
        except TypeError as e:
            self.show_toast(f"Cannot edit {editor.label}: {e}", "error")
            return None
        item = next((i for i in items if isinstance(i, dict) and i.get("id") == item_id), None)
        if item is None:
            return None
        editor.edit(item)
        return editor.form

    def edit_menu_item(self, item_id: int) -> Optional[Dict[str, Any]]:
        return self._edit(self.menu_editor, item_id)

    def edit_special(self, special_id: int) -> Optional[Dict[str, Any]]:
        return self._edit(self.special_editor, special_id)

    def edit_event(self, event_id: int) -> Optional[Dict[str, Any]]:
        return self._edit(self.event_editor, event_id)

    def reset_menu_form(self):
        self.menu_editor.reset()

    def reset_special_form(self):
        self.special_editor.reset()

    def reset_event_form(self):
        self.event_editor.reset()

    async def _save_item(self, editor: EntityEditor, item: Dict[str, Any]) -> bool:
        doc_type = editor.doc_type
        label = editor.label
        document = self.current_data.get(doc_type.key)
        if document is None:
            self.show_toast(f"Cannot save {label}: {doc_type.filename} is not loaded", "error")
            return False

        candidate = copy.deepcopy(document)
        try:
            items = doc_type.items(candidate)
        except TypeError as e:
            self.show_toast(f"Cannot save {label}: {e}", "error")
            return False
        updating = editor.editing_id is not None

        if updating:
            index = next((n for n, i in enumerate(items) if i.get("id") == editor.editing_id), -1)
            if index == -1:
                self.show_toast(f"Failed to save {label}: it no longer exists", "error")
                editor.reset()
                return False
            item["id"] = editor.editing_id
            items[index] = {**items[index], **item}
        else:
            item["id"] = next_item_id(items)
            items.append(item)

        error = doc_type.validation_error(candidate)
        if error:
            self.show_toast(error, "error")
            return False

        editor.submit()
        result = await self.api.save_data(doc_type.filename, candidate)
        if not result.get("success"):
            editor.fail()
            self.show_toast(f"Failed to save {label}: {result.get('error', 'unknown error')}", "error")
            return False

        self.current_data[doc_type.key] = candidate
        self.show_toast(f"{label.capitalize()} {'updated' if updating else 'added'}!")
        editor.reset()
        self.refresh_section(doc_type.key)
        return True

    async def save_menu_item(self, form: Mapping[str, Any]) -> bool:
        item = {
            "name": _text(form, "name"),
            "category": _text(form, "category"),
            "price": _price(form),
            "description": _text(form, "description"),
            "image": _text(form, "image"),
        }
        if not all([item["name"], item["category"], item["price"], item["description"], item["image"]]):
            self.show_toast("Please fill all required fields", "error")
            return False
        if item["price"] <= 0:
            self.show_toast("Price must be greater than 0", "error")
            return False
        return await self._save_item(self.menu_editor, item)

    async def save_special(self, form: Mapping[str, Any]) -> bool:
        special = {
            "day": _text(form, "day"),
            "name": _text(form, "name"),
            "items": _text(form, "items"),
            "price": _price(form),
            "discount": _text(form, "discount"),
            "description": _text(form, "description"),
        }
        if not all(special.values()):
            self.show_toast("Please fill all required fields", "error")
            return False
        if special["price"] <= 0:
            self.show_toast("Price must be greater than 0", "error")
            return False
        return await self._save_item(self.special_editor, special)

    async def save_event(self, form: Mapping[str, Any]) -> bool:
        event = {
            "name": _text(form, "name"),
            "date": _text(form, "date"),
            "description": _text(form, "description"),
            "image": _text(form, "image"),
            "tag": _text(form, "tag"),
        }
        if not all(event.values()):
            self.show_toast("Please fill all required fields", "error")
            return False
        event["featured"] = _flag(form.get("featured", False))
        return await self._save_item(self.event_editor, event)

    async def _delete_item(self, editor: EntityEditor, item_id: int) -> bool:
        doc_type = editor.doc_type
        label = editor.label
        if not self.confirm(f"Are you sure you want to delete this {label}?"):
            return False

        try:
            await self.api.delete_item(doc_type.filename, item_id)
        except DataAPIError as e:
            logger.error(f"Error deleting {label} {item_id}: {e.message}")
            self.show_toast(f"Failed to delete {label}: {e.message}", "error")
            return False

        document = self.current_data.get(doc_type.key)
        if document is not None:
            document[doc_type.items_key] = [
                item for item in doc_type.items(document) if item.get("id") != item_id
            ]
        if editor.editing_id == item_id:
            editor.reset()

        self.show_toast(f"{label.capitalize()} deleted!")
        self.refresh_section(doc_type.key)
        return True

    async def delete_menu_item(self, item_id: int) -> bool:
        return await self._delete_item(self.menu_editor, item_id)

    async def delete_special(self, special_id: int) -> bool:
        return await self._delete_item(self.special_editor, special_id)

    async def delete_event(self, event_id: int) -> bool:
        return await self._delete_item(self.event_editor, event_id)

    # ==================== CONTACT ====================

    def load_contact_form(self) -> Optional[Dict[str, str]]:
        contact = self.current_data.get(CONTACT.key)
        if not contact:
            return None
        hours = contact.get("workingHours", {})
        social = contact.get("socialMedia", {})
        self.contact_form = {
            "address": contact.get("address", ""),
            "phone": contact.get("phone", ""),
            "email": contact.get("email", ""),
            "weekdays": hours.get("weekdays", ""),
            "weekends": hours.get("weekends", ""),
            "facebook": social.get("facebook", ""),
            "instagram": social.get("instagram", ""),
            "twitter": social.get("twitter", ""),
            "tripadvisor": social.get("tripadvisor", ""),
        }
        return self.contact_form

    async def save_contact(self, form: Mapping[str, Any]) -> bool:
        contact = {
            "address": _text(form, "address"),
            "phone": _text(form, "phone"),
            "email": _text(form, "email"),
            "workingHours": {
                "weekdays": _text(form, "weekdays"),
                "weekends": _text(form, "weekends"),
            },
            "socialMedia": {
                "facebook": _text(form, "facebook"),
                "instagram": _text(form, "instagram"),
                "twitter": _text(form, "twitter"),
                "tripadvisor": _text(form, "tripadvisor"),
            },
        }
        required = [contact["address"], contact["phone"], contact["email"], *contact["workingHours"].values()]
        if not all(required):
            self.show_toast("Please fill all required fields", "error")
            return False

        error = CONTACT.validation_error(contact)
        if error:
            self.show_toast(error, "error")
            return False

        result = await self.api.save_data(CONTACT.filename, contact)
        if not result.get("success"):
            self.show_toast(
                f"Failed to save contact information: {result.get('error', 'unknown error')}", "error"
            )
            return False

        self.current_data[CONTACT.key] = contact
        self.load_contact_form()
        self.show_toast("Contact information updated!")
        return True

    # ==================== JSON EDITOR ====================

    async def load_json(self, filename: str) -> Optional[str]:
        data = await self.api.fetch_data(filename)
        if data is None:
            self.json_status = f"Failed to load {filename}"
            return None
        self.json_status = f"Loaded {filename} successfully"
        return json.dumps(data, indent=2, ensure_ascii=False)

    async def save_json(self, filename: str, text: str) -> bool:
        try:
            data = json.loads(text)
        except ValueError as e:
            self.json_status = f"Invalid JSON: {str(e)}"
            return False

        doc_type = get_document_type(filename)
        if doc_type is not None:
            error = doc_type.validation_error(data)
            if error:
                self.json_status = error
                return False

        result = await self.api.save_data(filename, data)
        if not result.get("success"):
            self.json_status = result.get("error", "Failed to save JSON")
            return False

        self.json_status = f"Saved {filename} successfully"
        self.show_toast("JSON file saved!")
        if doc_type is not None:
            self.current_data[doc_type.key] = data
            self.refresh_section(doc_type.key)
        return True

    async def create_backup(self) -> Optional[str]:
        try:
            result = await self.api.create_backup()
        except DataAPIError as e:
            self.show_toast(f"Failed to create backup: {e.message}", "error")
            return None
        self.show_toast("Backup created successfully")
        return result.get("backupPath")


__all__ = ["AdminController", "EntityEditor", "EditState", "TableView", "always_confirm"]
