#!/usr/bin/env python3
"""Tests for the admin panel controller"""

import asyncio
import copy
import json

from conftest import read_document, unreachable_transport, write_document
from app.clients.admin import AdminController, EditState


def make_admin(api, confirm=lambda message: True):
    return AdminController(api, confirm=confirm)


MOCHA_FORM = {
    "name": "  Mocha ",
    "category": "Coffee",
    "price": "5.25",
    "description": "Chocolate and espresso",
    "image": "images/mocha.jpg",
}


def test_load_all_data_renders_tables(make_api, seed):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.start()

            assert admin.current_data == seed
            menu_table = admin.tables["menu"]
            assert menu_table.heading == "Menu Items (4 total)"
            assert menu_table.rows[0]["price"] == "$4.50"
            assert menu_table.rows[0]["image"] == "latte.jpg"
            assert admin.tables["specials"].total == 3
            assert admin.tables["events"].rows[0]["featured"] is True
            assert admin.contact_form["weekdays"] == "Mon-Fri 7-21"
            assert admin.notifier.last.message == "Admin panel ready!"

    asyncio.run(scenario())


def test_create_menu_item_assigns_next_id(make_api, data_dir):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()

            assert await admin.save_menu_item(MOCHA_FORM) is True

            stored = read_document(data_dir, "menu")["items"]
            assert stored[-1] == {
                "id": 5, "name": "Mocha", "category": "Coffee", "price": 5.25,
                "description": "Chocolate and espresso", "image": "images/mocha.jpg",
            }
            assert admin.current_data["menu"]["items"][-1]["id"] == 5
            assert admin.tables["menu"].total == 5
            assert admin.menu_editor.state is EditState.IDLE
            assert admin.notifier.last.message == "Menu item added!"

    asyncio.run(scenario())


def test_edit_then_save_updates_in_place(make_api, data_dir, seed):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()

            form = admin.edit_menu_item(2)
            assert admin.menu_editor.state is EditState.EDITING
            assert admin.menu_editor.submit_label == "Update Item"
            assert form["name"] == "Earl Grey"

            form["price"] = "3.75"
            assert await admin.save_menu_item(form) is True

            stored = read_document(data_dir, "menu")["items"]
            assert stored[1] == dict(seed["menu"]["items"][1], price=3.75)
            assert len(stored) == 4
            assert admin.menu_editor.editing_id is None
            assert admin.notifier.last.message == "Menu item updated!"

    asyncio.run(scenario())


def test_editors_are_independent(make_api):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()

            admin.edit_menu_item(1)
            admin.edit_event(2)
            admin.reset_menu_form()

            assert admin.menu_editor.state is EditState.IDLE
            assert admin.event_editor.state is EditState.EDITING
            assert admin.event_editor.editing_id == 2
            assert admin.special_editor.state is EditState.IDLE

    asyncio.run(scenario())


def test_client_side_validation_blocks_request(make_api, data_dir):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()
            before = read_document(data_dir, "menu")

            assert await admin.save_menu_item(dict(MOCHA_FORM, price="-2")) is False
            assert admin.notifier.last.message == "Price must be greater than 0"

            assert await admin.save_menu_item(dict(MOCHA_FORM, name="")) is False
            assert admin.notifier.last.message == "Please fill all required fields"

            assert await admin.save_special({"day": "Monday", "name": "x"}) is False
            assert read_document(data_dir, "menu") == before

    asyncio.run(scenario())


def test_failed_save_leaves_local_state_untouched(make_api, seed):
    async def scenario():
        async with make_api(unreachable_transport()) as api:
            admin = make_admin(api)
            admin.current_data = copy.deepcopy(seed)

            admin.edit_special(1)
            form = dict(admin.special_editor.form, price="7.00")
            assert await admin.save_special(form) is False

            assert admin.current_data["specials"] == seed["specials"]
            assert admin.special_editor.state is EditState.EDITING
            assert admin.special_editor.editing_id == 1
            assert admin.notifier.last.kind == "error"

    asyncio.run(scenario())


def test_malformed_menu_does_not_block_other_sections(make_api, data_dir):
    write_document(data_dir, "menu", {"categories": ["Coffee"]})

    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()

            assert "menu" not in admin.tables
            assert admin.tables["specials"].total == 3
            assert admin.tables["events"].total == 2
            assert admin.contact_form["weekdays"] == "Mon-Fri 7-21"
            assert [t.message for t in admin.notifier.history if t.kind == "error"] == [
                "Could not display menu data"
            ]

            assert admin.edit_menu_item(1) is None
            assert await admin.save_menu_item(MOCHA_FORM) is False
            assert admin.notifier.last.kind == "error"

    asyncio.run(scenario())


def test_non_numeric_price_only_blanks_its_table(make_api, data_dir, seed):
    specials = copy.deepcopy(seed["specials"])
    specials["specials"][0]["price"] = "cheap"
    write_document(data_dir, "specials", specials)

    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()

            assert "specials" not in admin.tables
            assert admin.tables["menu"].total == 4
            assert admin.tables["events"].total == 2

    asyncio.run(scenario())


def test_save_event_with_featured_flag(make_api, data_dir):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()

            saved = await admin.save_event({
                "name": "Poetry Evening", "date": "Thursday, 8 PM", "description": "Open mic",
                "image": "images/poetry.jpg", "tag": "Culture", "featured": "on",
            })
            assert saved is True
            event = read_document(data_dir, "events")["events"][-1]
            assert event["id"] == 3
            assert event["featured"] is True

    asyncio.run(scenario())


def test_delete_requires_confirmation(make_api, data_dir):
    async def scenario():
        async with make_api() as api:
            asked = []
            admin = make_admin(api, confirm=lambda message: asked.append(message) or False)
            await admin.load_all_data()

            assert await admin.delete_event(1) is False
            assert asked == ["Are you sure you want to delete this event?"]
            assert len(read_document(data_dir, "events")["events"]) == 2

    asyncio.run(scenario())


def test_delete_removes_locally_after_server(make_api, data_dir):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()
            admin.edit_menu_item(3)

            assert await admin.delete_menu_item(3) is True
            assert [i["id"] for i in admin.current_data["menu"]["items"]] == [1, 2, 4]
            assert [i["id"] for i in read_document(data_dir, "menu")["items"]] == [1, 2, 4]
            assert admin.menu_editor.state is EditState.IDLE
            assert admin.tables["menu"].total == 3

    asyncio.run(scenario())


def test_failed_delete_keeps_local_item(make_api, seed):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()

            assert await admin.delete_special(99) is False
            assert admin.current_data["specials"] == seed["specials"]
            assert admin.notifier.last.message == "Failed to delete special: API error: Item not found"

    asyncio.run(scenario())


def test_save_contact(make_api, data_dir, seed):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()

            form = dict(admin.contact_form, phone=" +1 555 000 1111 ")
            assert await admin.save_contact(form) is True
            assert read_document(data_dir, "contact") == dict(seed["contact"], phone="+1 555 000 1111")
            assert admin.contact_form["phone"] == "+1 555 000 1111"

            assert await admin.save_contact(dict(form, email="")) is False
            assert admin.notifier.last.message == "Please fill all required fields"

    asyncio.run(scenario())


def test_json_editor(make_api, data_dir, seed):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            await admin.load_all_data()

            text = await admin.load_json("events.json")
            assert json.loads(text) == seed["events"]
            assert admin.json_status == "Loaded events.json successfully"

            assert await admin.save_json("events.json", "{not json") is False
            assert admin.json_status.startswith("Invalid JSON")

            assert await admin.save_json("events.json", json.dumps({"items": []})) is False
            assert admin.json_status.startswith("Events data must have an events array")

            events = {"events": seed["events"]["events"][1:]}
            assert await admin.save_json("events.json", json.dumps(events)) is True
            assert admin.json_status == "Saved events.json successfully"
            assert admin.current_data["events"] == events
            assert admin.tables["events"].total == 1
            assert read_document(data_dir, "events") == events

    asyncio.run(scenario())


def test_backup_from_admin(make_api, tmp_path):
    async def scenario():
        async with make_api() as api:
            admin = make_admin(api)
            path = await admin.create_backup()
            assert path is not None
            assert (tmp_path / "backups").exists()

    asyncio.run(scenario())
