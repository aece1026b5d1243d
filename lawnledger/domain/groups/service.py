"""
Group Assignment Board

Keeps customer.group_id and group.customer_ids in agreement: a customer
belongs to at most one group, and the group listing it is the group the
customer points at. Every multi-call mutation runs as a compensating saga.
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional

from ...config import DEFAULT_GROUP_COLOR, DEFAULT_GROUP_WORK_MINUTES
from ...exceptions import GatewayError, RecordNotFound, ValidationFailed
from ...schemas import CustomerRecord, GroupDraft, GroupRecord
from ...services.drag_state import DragSlot, DragState
from ...services.notification_service import OperationResult, cancelled
from ...services.saga import Saga
from ...shared.validators import optional_text, parse_minutes, require_text, validate_hex_color
from .schemas import GroupForm, GroupOverview, GroupSummary

if TYPE_CHECKING:
    from ...services.workspace import Workspace

logger = logging.getLogger(__name__)

DELETE_GROUP_PROMPT = "Are you sure you want to delete this group? Customers will not be deleted."

Confirm = Callable[[str], bool]


def parse_group_form(form: GroupForm) -> dict:
    """
    Validate a group form into record fields.

    Raises:
        ValidationFailed: If the name is blank, the work time negative or the color malformed
    """
    name = require_text(form.name, "Group name is required")
    work_time = parse_minutes(form.workTimeMinutes) or 0
    if work_time < 0:
        raise ValidationFailed("Work time cannot be negative")
    return {
        "name": name,
        "work_time_minutes": work_time,
        "color": validate_hex_color(form.color) or DEFAULT_GROUP_COLOR,
        "notes": optional_text(form.notes),
    }


class GroupBoard:
    """Group CRUD plus drag-to-assign of customers"""

    def __init__(self, workspace: "Workspace"):
        self.workspace = workspace
        self.drag: DragSlot[int] = DragSlot("group board")

    @property
    def hovered_group_id(self) -> Optional[int]:
        return self.drag.hovered

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def ungrouped_customers(self) -> list[CustomerRecord]:
        return [c for c in self.workspace.customers.snapshot() if c.group_id is None]

    def group_members(self, group: GroupRecord) -> list[CustomerRecord]:
        """Customers pointing at the group, plus listed ids that still exist"""
        listed = set(group.customer_ids)
        return [
            c
            for c in self.workspace.customers.snapshot()
            if c.group_id == group.id or c.id in listed
        ]

    def effective_work_minutes(self, group: GroupRecord) -> int:
        # Zero and unset both fall back to an hour per member
        if group.work_time_minutes:
            return group.work_time_minutes
        return len(self.group_members(group)) * DEFAULT_GROUP_WORK_MINUTES

    def overview(self) -> GroupOverview:
        hovered = self.hovered_group_id
        summaries = []
        for group in self.workspace.groups.snapshot():
            members = self.group_members(group)
            summaries.append(
                GroupSummary(
                    group=group,
                    members=members,
                    member_count=len(members),
                    effective_work_minutes=self.effective_work_minutes(group),
                    is_drop_target=group.id == hovered,
                )
            )
        return GroupOverview(
            groups=summaries,
            ungrouped=self.ungrouped_customers(),
            dragging_customer_id=self.drag.entity_id,
            hovered_group_id=hovered,
        )

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def _require_customer(self, customer_id: int) -> CustomerRecord:
        customer = self.workspace.customers.get(customer_id)
        if customer is None:
            raise RecordNotFound("Customer", customer_id)
        return customer

    def _require_group(self, group_id: int) -> GroupRecord:
        group = self.workspace.groups.get(group_id)
        if group is None:
            raise RecordNotFound("CustomerGroup", group_id)
        return group

    async def assign_to_group(self, customer_id: int, group_id: int) -> OperationResult:
        """
        Put a customer in a group.

        Any other group still listing the customer lets go of it first, so a
        customer never ends up in two member lists. Assigning to the current
        group again is a harmless repeat.
        """
        ws = self.workspace
        gateway = ws.gateway
        customer = self._require_customer(customer_id)
        group = self._require_group(group_id)
        already_member = customer_id in group.customer_ids

        previous_groups = [
            g.id
            for g in ws.groups.snapshot()
            if g.id != group_id and (customer_id in g.customer_ids or g.id == customer.group_id)
        ]

        try:
            async with Saga(f"assign customer {customer_id} to group {group_id}") as saga:
                for previous_id in previous_groups:
                    await saga.step(
                        f"leave group {previous_id}",
                        lambda gid=previous_id: gateway.remove_customer_from_group(gid, customer_id),
                        compensation=lambda gid=previous_id: gateway.add_customer_to_group(
                            gid, customer_id
                        ),
                    )
                await saga.step(
                    "set customer group",
                    lambda: gateway.update_customer(customer.model_copy(update={"group_id": group_id})),
                    compensation=lambda: gateway.update_customer(customer),
                )
                await saga.step(
                    "add group member",
                    lambda: gateway.add_customer_to_group(group_id, customer_id),
                    compensation=None
                    if already_member
                    else lambda: gateway.remove_customer_from_group(group_id, customer_id),
                )
                await saga.step("refresh customers", ws.customers.refresh)
                await saga.step("refresh groups", ws.groups.refresh)
        except GatewayError as e:
            logger.error(f"❌ Error adding customer {customer_id} to group {group_id}: {e}")
            await ws.refresh_quietly(ws.customers, ws.groups)
            return ws.notifier.failure("Failed to add customer to group", entity_id=customer_id)

        logger.info(f"✅ Customer {customer_id} assigned to group {group_id}")
        return ws.notifier.success(f"Added {customer.name} to {group.name}", entity_id=customer_id)

    async def remove_from_group(self, customer_id: int) -> OperationResult:
        ws = self.workspace
        gateway = ws.gateway
        customer = self._require_customer(customer_id)
        if customer.group_id is None:
            return ws.notifier.rejected(f"{customer.name} is not in a group")

        group_id = customer.group_id
        group = ws.groups.get(group_id)
        listed = group is not None and customer_id in group.customer_ids

        try:
            async with Saga(f"remove customer {customer_id} from group {group_id}") as saga:
                await saga.step(
                    "clear customer group",
                    lambda: gateway.update_customer(customer.model_copy(update={"group_id": None})),
                    compensation=lambda: gateway.update_customer(customer),
                )
                if listed:
                    await saga.step(
                        "remove group member",
                        lambda: gateway.remove_customer_from_group(group_id, customer_id),
                        compensation=lambda: gateway.add_customer_to_group(group_id, customer_id),
                    )
                await saga.step("refresh customers", ws.customers.refresh)
                await saga.step("refresh groups", ws.groups.refresh)
        except GatewayError as e:
            logger.error(f"❌ Error removing customer {customer_id} from group {group_id}: {e}")
            await ws.refresh_quietly(ws.customers, ws.groups)
            return ws.notifier.failure("Failed to remove customer from group", entity_id=customer_id)

        logger.info(f"✅ Customer {customer_id} removed from group {group_id}")
        return ws.notifier.success(f"Removed {customer.name} from group", entity_id=customer_id)

    # ------------------------------------------------------------------
    # Group CRUD
    # ------------------------------------------------------------------

    async def create_group(self, form: GroupForm) -> OperationResult:
        ws = self.workspace
        try:
            fields = parse_group_form(form)
        except ValidationFailed as e:
            return ws.notifier.rejected(str(e))

        try:
            group = await ws.gateway.create_customer_group(GroupDraft(**fields))
            ws.groups.apply(group)
        except GatewayError as e:
            logger.error(f"❌ Error creating group '{fields['name']}': {e}")
            await ws.refresh_quietly(ws.groups)
            return ws.notifier.failure("Failed to create group")

        await ws.refresh_quietly(ws.groups)
        logger.info(f"✅ Group created: {group.id} ({group.name})")
        return ws.notifier.success("Group created successfully", entity_id=group.id)

    async def update_group(self, group_id: int, form: GroupForm) -> OperationResult:
        ws = self.workspace
        group = self._require_group(group_id)
        try:
            fields = parse_group_form(form)
        except ValidationFailed as e:
            return ws.notifier.rejected(str(e))

        try:
            updated = await ws.gateway.update_customer_group(group.model_copy(update=fields))
            ws.groups.apply(updated)
        except GatewayError as e:
            logger.error(f"❌ Error updating group {group_id}: {e}")
            await ws.refresh_quietly(ws.groups)
            return ws.notifier.failure("Failed to update group", entity_id=group_id)

        await ws.refresh_quietly(ws.groups)
        logger.info(f"✅ Group updated: {group_id}")
        return ws.notifier.success("Group updated successfully", entity_id=group_id)

    async def delete_group(self, group_id: int, confirm: Confirm) -> OperationResult:
        """
        Delete a group after confirmation. Members stay; their group_id is cleared.

        Args:
            group_id: Group to delete
            confirm: Called with the prompt; returning False cancels with no gateway call
        """
        ws = self.workspace
        gateway = ws.gateway
        group = self._require_group(group_id)
        if not confirm(DELETE_GROUP_PROMPT):
            return cancelled("Group deletion cancelled")

        pointing = [c for c in self.group_members(group) if c.group_id == group_id]

        try:
            async with Saga(f"delete group {group_id}") as saga:
                for member in pointing:
                    await saga.step(
                        f"clear group for customer {member.id}",
                        lambda m=member: gateway.update_customer(m.model_copy(update={"group_id": None})),
                        compensation=lambda m=member: gateway.update_customer(m),
                    )
                await saga.step("delete group", lambda: gateway.delete_customer_group(group_id))
        except GatewayError as e:
            logger.error(f"❌ Error deleting group {group_id}: {e}")
            await ws.refresh_quietly(ws.customers, ws.groups)
            return ws.notifier.failure("Failed to delete group", entity_id=group_id)

        # Deletion is final; local state follows it even if the re-fetch fails
        for member in pointing:
            ws.customers.apply(member.model_copy(update={"group_id": None}))
        ws.groups.discard(group_id)
        await ws.refresh_quietly(ws.customers, ws.groups)

        logger.info(f"✅ Group deleted: {group_id} ({len(pointing)} customers ungrouped)")
        return ws.notifier.success("Group deleted successfully", entity_id=group_id)

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------

    def start_drag(self, customer_id: int) -> DragState:
        self._require_customer(customer_id)
        return self.drag.start(customer_id)

    def drag_over(self, group_id: int) -> DragState:
        self._require_group(group_id)
        return self.drag.over(group_id)

    def drag_leave(self) -> DragState:
        return self.drag.leave()

    def cancel_drag(self) -> DragState:
        return self.drag.cancel()

    async def drop(self, group_id: Optional[int] = None) -> OperationResult:
        """Assign the dragged customer to a group. The slot is cleared whatever happens."""
        try:
            customer_id, target = self.drag.drop(group_id)
            return await self.assign_to_group(customer_id, target)
        finally:
            self.drag.reset()
