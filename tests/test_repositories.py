"""Tests for the per-entity repository functions and the store adapter."""

from datetime import datetime, timezone

import pytest

from reunitems.core import store
from reunitems.core.errors import InputError, NotFoundError, StoreError
from reunitems.CLAIMS import claims
from reunitems.ITEMS import items, locations
from reunitems.ITEMS.models import UNKNOWN_LOCATION
from reunitems.ORGS import members, organizations
from reunitems.ORGS.models import ApprovalStatus, MemberRole
from reunitems.REQUESTS import missing_items
from reunitems.USERS import users

ORG = "org-1"


class TestStoreAdapter:
    async def test_get_missing_returns_none(self, fake_db):
        assert await store.get_document("Organizations/missing") is None
        assert await organizations.get_organization("missing") is None
        assert await items.get_item(ORG, "missing") is None
        assert await claims.get_claim("missing") is None

    async def test_add_ignores_caller_created_at(self, fake_db):
        supplied = datetime(2000, 1, 1, tzinfo=timezone.utc)
        doc_id = await store.add_document("Things", {"name": "x", "createdAt": supplied})
        assert fake_db.data(f"Things/{doc_id}")["createdAt"] != supplied

    async def test_update_is_partial(self, fake_db):
        fake_db.seed("Things/a", {"name": "x", "color": "red"})
        await store.update_document("Things/a", {"color": "blue"})
        assert fake_db.data("Things/a") == {"name": "x", "color": "blue"}

    async def test_update_missing_raises_not_found(self, fake_db):
        with pytest.raises(NotFoundError):
            await store.update_document("Things/missing", {"name": "x"})

    async def test_backend_failure_becomes_store_error(self, fake_db):
        fake_db.fail_on.add(("get", "Things/a"))
        with pytest.raises(StoreError):
            await store.get_document("Things/a")

    @pytest.mark.parametrize("bad", ["", "a/b"])
    async def test_invalid_ids_rejected_before_any_call(self, fake_db, bad):
        with pytest.raises(InputError):
            await organizations.get_organization(bad)

    async def test_filters_and_limit(self, fake_db):
        fake_db.seed("Things/a", {"kind": "x"})
        fake_db.seed("Things/b", {"kind": "y"})
        fake_db.seed("Things/c", {"kind": "x"})
        fake_db.seed("Things/c/Sub/d", {"kind": "x"})
        found = await store.list_documents("Things", [("kind", "==", "x")])
        assert sorted(d["id"] for d in found) == ["a", "c"]
        assert len(await store.list_documents("Things", limit=1)) == 1


class TestOrganizations:
    async def test_update_and_delete(self, fake_db):
        org_id = await organizations.add_organization("Branham")
        await organizations.update_organization(org_id, organizations.organization_updates(address="1 School Rd"))
        org = await organizations.get_organization(org_id)
        assert org.name == "Branham"
        assert org.address == "1 School Rd"

        await organizations.delete_organization(org_id)
        assert await organizations.get_organization(org_id) is None

    async def test_legacy_document_without_status_is_pending(self, fake_db):
        fake_db.seed("Organizations/legacy", {"name": "Old School"})
        org = await organizations.get_organization("legacy")
        assert org.approval_status == "pending"


class TestMembers:
    async def test_member_lifecycle(self, fake_db):
        await members.set_member(ORG, "bob", MemberRole.REGULAR, ApprovalStatus.PENDING, "hello")
        found = await members.find_member_by_user(ORG, "bob")
        assert (found.id, found.message) == ("bob", "hello")

        await members.set_application_status(ORG, "bob", ApprovalStatus.APPROVED)
        assert (await members.list_members(ORG, status=ApprovalStatus.APPROVED))[0].user_id == "bob"

        await members.delete_member(ORG, "bob")
        assert await members.get_member(ORG, "bob") is None
        assert await members.find_member_by_user(ORG, "bob") is None

    async def test_member_stored_under_other_id_is_found(self, fake_db):
        fake_db.seed(f"Organizations/{ORG}/Members/legacy-id", {
            "UserRef": fake_db.document("Users/bob"),
            "UserRole": "admin",
            "ApplicationStatus": "approved",
        })
        found = await members.find_member_by_user(ORG, "bob")
        assert (found.id, found.user_id, found.is_admin) == ("legacy-id", "bob", True)


class TestLocationsAndItems:
    async def test_item_requires_location_in_same_org(self, fake_db):
        other_loc = await locations.add_location("org-2", "Gym")
        with pytest.raises(InputError):
            await items.add_item(ORG, "Keys", other_loc)
        with pytest.raises(InputError):
            await items.add_item(ORG, "Keys", "")

    async def test_item_defaults(self, fake_db):
        loc_id = await locations.add_location(ORG, "Library", "Front desk", 34.0, -118.0)
        item_id = await items.add_item(ORG, "  Red Water Bottle ", loc_id)

        item = await items.get_item(ORG, item_id)
        assert item.name == "Red Water Bottle"
        assert item.location_id == loc_id
        assert item.found_at is not None
        assert item.created_at is not None

    async def test_answer_withheld_from_display(self, fake_db):
        loc_id = await locations.add_location(ORG, "Library")
        item_id = await items.add_item(ORG, "Wallet", loc_id, hide_question="What color?", hide_answer="Brown")

        shown = await items.get_display_item(ORG, item_id)
        assert shown.hide_question == "What color?"
        assert shown.hide_answer is None
        assert (await items.get_display_item(ORG, item_id, include_answer=True)).hide_answer == "Brown"

    async def test_deleted_location_degrades_to_placeholder(self, fake_db):
        loc_id = await locations.add_location(ORG, "Library")
        item_id = await items.add_item(ORG, "Calculator", loc_id)
        await locations.delete_location(ORG, loc_id)

        assert await locations.get_location(ORG, loc_id) is None
        assert (await items.get_item(ORG, item_id)).location_id == loc_id
        assert (await items.get_display_item(ORG, item_id)).location == UNKNOWN_LOCATION
        listed = await items.list_display_items(ORG)
        assert [(i.id, i.location) for i in listed] == [(item_id, UNKNOWN_LOCATION)]

    async def test_location_read_failure_degrades(self, fake_db):
        loc_id = await locations.add_location(ORG, "Library")
        await items.add_item(ORG, "Calculator", loc_id)
        fake_db.fail_on.add(("list", f"Organizations/{ORG}/Locations"))
        listed = await items.list_display_items(ORG)
        assert listed[0].location == UNKNOWN_LOCATION

    async def test_item_update_and_delete(self, fake_db):
        first = await locations.add_location(ORG, "Library")
        second = await locations.add_location(ORG, "Gym")
        item_id = await items.add_item(ORG, "Scarf", first, description="Wool")

        updates = await items.item_updates(ORG, location_id=second)
        await items.update_item(ORG, item_id, updates)
        item = await items.get_item(ORG, item_id)
        assert item.location_id == second
        assert item.description == "Wool"

        await items.delete_item(ORG, item_id)
        assert await items.get_item(ORG, item_id) is None

    async def test_location_update(self, fake_db):
        loc_id = await locations.add_location(ORG, "Library")
        await locations.update_location(ORG, loc_id, locations.location_fields(description="Second floor"))
        loc = await locations.get_location(ORG, loc_id)
        assert (loc.name, loc.description) == ("Library", "Second floor")


class TestClaims:
    async def test_claim_denormalizes_and_lists(self, fake_db):
        fake_db.seed("Users/bob", {"UserName": "Bob", "UserEmail": "bob@example.com"})
        loc_id = await locations.add_location(ORG, "Library")
        item_id = await items.add_item(ORG, "Umbrella", loc_id)

        claim_id = await claims.add_claim(ORG, item_id, "bob", "It has my initials")
        claim = await claims.get_claim(claim_id)
        assert (claim.organization_id, claim.item_id, claim.user_id) == (ORG, item_id, "bob")
        assert claim.user_name == "Bob"
        assert claim.item_location == "Library"

        assert [c.id for c in await claims.list_claims_for_item(ORG, item_id)] == [claim_id]
        mine = await claims.list_claims_for_user("bob")
        assert [c.id for c in mine] == [claim_id]
        assert mine[0].item_available is True

        await claims.answer_claim(claim_id, "Come to the front desk")
        assert (await claims.get_claim(claim_id)).answer == "Come to the front desk"

    async def test_claim_on_missing_item(self, fake_db):
        with pytest.raises(NotFoundError):
            await claims.add_claim(ORG, "missing", "bob")

    async def test_dangling_claim_is_reported(self, fake_db):
        loc_id = await locations.add_location(ORG, "Library")
        item_id = await items.add_item(ORG, "Umbrella", loc_id)
        claim_id = await claims.add_claim(ORG, item_id, "bob")
        await items.delete_item(ORG, item_id)

        mine = await claims.list_claims_for_user("bob")
        assert mine[0].item_available is False

        await claims.delete_claim(claim_id)
        assert await claims.get_claim(claim_id) is None


class TestRequestsAndUsers:
    async def test_missing_item_requests(self, fake_db):
        with pytest.raises(InputError):
            await missing_items.add_request(ORG, "bob", " ")

        mine = await missing_items.add_request(ORG, "bob", "Blue scarf", "Left in the gym")
        await missing_items.add_request(ORG, "carol", "Keys")

        assert len(await missing_items.list_requests(ORG)) == 2
        assert [r.id for r in await missing_items.list_requests(ORG, user_id="bob")] == [mine]

        await missing_items.update_request(ORG, mine, {"ItemDesc": "Left on the bleachers"})
        assert (await missing_items.get_request(ORG, mine)).description == "Left on the bleachers"

        await missing_items.delete_request(ORG, mine)
        assert await missing_items.get_request(ORG, mine) is None

    async def test_create_or_update_user(self, fake_db):
        await users.create_or_update_user("u1", {"UserEmail": "a@example.com", "UserName": "A"})
        created_at = fake_db.data("Users/u1")["createdAt"]
        await users.create_or_update_user("u1", {"UserName": "Alice"})

        user = await users.get_user("u1")
        assert user.display_name == "Alice"
        assert user.email == "a@example.com"
        assert fake_db.data("Users/u1")["createdAt"] == created_at

        await users.set_last_organization("u1", ORG)
        assert (await users.get_user("u1")).last_organization_id == ORG
        assert (await users.get_user_record_by_email("a@example.com"))["id"] == "u1"
