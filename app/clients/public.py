# app/clients/public.py
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from app.clients.data_api import DataAPI
from app.models.documents import CONTACT, EVENTS, MENU, SPECIALS, WEEKDAYS

logger = logging.getLogger(__name__)

# Public site reloads everything every 30 seconds
REFRESH_INTERVAL = 30

SORT_OPTIONS = ("category", "price-low", "price-high", "name")


@dataclass
class MenuView:
    categories: List[str]
    active_category: str
    items: List[Dict[str, Any]]
    search: str = ""
    sort: str = "category"

    @property
    def empty(self) -> bool:
        return not self.items

    @property
    def search_summary(self) -> Optional[str]:
        if not self.search:
            return None
        return f"Search Results ({len(self.items)} items found)"


@dataclass
class SpecialsView:
    today: str
    specials: List[Dict[str, Any]]

    @property
    def todays_specials(self) -> List[Dict[str, Any]]:
        return [special for special in self.specials if special["today"]]


@dataclass
class EventsView:
    events: List[Dict[str, Any]]
    search: str = ""

    @property
    def empty(self) -> bool:
        return not self.events


@dataclass
class ContactView:
    address_lines: List[str]
    phone: str
    email: str
    hours: List[str]
    social_links: Dict[str, str] = field(default_factory=dict)


def _matches(item: Dict[str, Any], term: str, fields) -> bool:
    return any(term in str(item.get(name, "")).lower() for name in fields)


def sort_menu_items(items: List[Dict[str, Any]], sort_by: str) -> List[Dict[str, Any]]:
    if sort_by == "price-low":
        return sorted(items, key=lambda item: item["price"])
    if sort_by == "price-high":
        return sorted(items, key=lambda item: item["price"], reverse=True)
    if sort_by == "name":
        return sorted(items, key=lambda item: str(item["name"]).casefold())
    return sorted(items, key=lambda item: str(item["category"]).casefold())


class PublicSite:
    """Builds the public page sections from the café API"""

    def __init__(self, api: DataAPI, today: Callable[[], date] = date.today):
        self.api = api
        self.today = today
        self.views: Dict[str, Any] = {}

    async def menu_view(self, search: str = "", category: str = "all", sort: str = "category") -> Optional[MenuView]:
        menu = await self.api.fetch_data(MENU.filename)
        if menu is None:
            return None

        term = search.strip().lower()
        items = list(menu.get("items", []))
        if term:
            items = [item for item in items if _matches(item, term, ("name", "description", "category"))]
        if category != "all":
            items = [item for item in items if item.get("category") == category]

        view = MenuView(
            categories=["all", *menu.get("categories", [])],
            active_category=category,
            items=sort_menu_items(items, sort),
            search=term,
            sort=sort,
        )
        self.views[MENU.key] = view
        return view

    async def specials_view(self) -> Optional[SpecialsView]:
        data = await self.api.fetch_data(SPECIALS.filename)
        if data is None:
            return None

        today = WEEKDAYS[self.today().weekday()]
        specials = [
            {**special, "today": special.get("day") == today}
            for special in data.get("specials", [])
        ]
        view = SpecialsView(today=today, specials=specials)
        self.views[SPECIALS.key] = view
        return view

    async def events_view(self, search: str = "") -> Optional[EventsView]:
        data = await self.api.fetch_data(EVENTS.filename)
        if data is None:
            return None

        term = search.strip().lower()
        events = list(data.get("events", []))
        if term:
            events = [event for event in events if _matches(event, term, ("name", "description", "tag"))]

        view = EventsView(events=events, search=term)
        self.views[EVENTS.key] = view
        return view

    async def contact_view(self) -> Optional[ContactView]:
        contact = await self.api.fetch_data(CONTACT.filename)
        if contact is None:
            return None

        hours = contact.get("workingHours", {})
        view = ContactView(
            address_lines=str(contact.get("address", "")).split("\n"),
            phone=contact.get("phone", ""),
            email=contact.get("email", ""),
            hours=[hours.get("weekdays", ""), hours.get("weekends", "")],
            social_links=dict(contact.get("socialMedia", {})),
        )
        self.views[CONTACT.key] = view
        return view

    async def load(self, search: str = "", category: str = "all", sort: str = "category"):
        """Build every section"""
        await asyncio.gather(
            self.menu_view(search=search, category=category, sort=sort),
            self.specials_view(),
            self.events_view(search=search),
            self.contact_view(),
        )
        return self.views

    async def refresh(self):
        """Drop cached documents and rebuild every section with the current filters"""
        await self.api.clear_cache()
        menu: Optional[MenuView] = self.views.get(MENU.key)
        if menu is not None:
            await self.load(search=menu.search, category=menu.active_category, sort=menu.sort)
        else:
            await self.load()
        self.api.notifier.show("Data refreshed successfully")
        return self.views

    async def run_periodic_refresh(self, interval: float = REFRESH_INTERVAL):
        """Refresh all sections every ``interval`` seconds until cancelled"""
        while True:
            try:
                await asyncio.sleep(interval)
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error in periodic refresh: {str(e)}")


__all__ = [
    "PublicSite", "MenuView", "SpecialsView", "EventsView", "ContactView",
    "sort_menu_items", "SORT_OPTIONS", "REFRESH_INTERVAL",
]
