"""Group settlement domain service.

Tracks shared expenses of a group, the per-member split of each expense, and
a single aggregate outstanding figure per group (expenses minus
settlements). There is no pairwise who-owes-whom ledger.
"""

from datetime import date as date_type
from typing import Iterable, Optional, Sequence, Union

from pocketledger import config
from pocketledger.database.base import Database
from pocketledger.domain import errors
from pocketledger.domain.entities import (
    Group as GroupEntity,
    GroupDetail,
    GroupExpense as GroupExpenseEntity,
    GroupMember as GroupMemberEntity,
    MemberPosition,
    SplitMode,
)
from pocketledger.domain.money import Money, MoneyLike
from pocketledger.domain.splits import plan_splits
from pocketledger.utils.date_parser import month_range
from pocketledger.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_GROUP_ICON = "💸"


def parse_split_mode(value: Union[str, SplitMode]) -> SplitMode:
    """Coerce a string such as "equal" to a SplitMode.

    Raises:
        ValidationError: If the value is not a known split mode
    """
    if isinstance(value, SplitMode):
        return value
    try:
        return SplitMode(str(value).strip().upper().replace("-", "_"))
    except ValueError:
        raise errors.ValidationError(
            f"Invalid split mode '{value}'. Expected EQUAL, MANUAL or FULL_REIMBURSE"
        )


def is_settlement(expense: GroupExpenseEntity, marker: Optional[str] = None) -> bool:
    """Whether an expense is a settlement (reimbursement) entry.

    Expenses recorded in FULL_REIMBURSE mode carry an explicit flag. Entries
    without the flag still count when their description contains the
    settlement marker, which is how older rows were told apart.
    """
    marker = (marker if marker is not None else config.SETTLEMENT_MARKER).casefold()
    return expense.is_settlement or (bool(marker) and marker in expense.description.casefold())


class GroupService:
    """Service for groups, members and shared expenses."""

    def __init__(self, db: Database, settlement_marker: Optional[str] = None):
        """Initialize group service.

        Args:
            db: Database instance
            settlement_marker: Description marker identifying legacy
                settlement entries (defaults to configuration)
        """
        self.db = db
        self.settlement_marker = (
            settlement_marker if settlement_marker is not None else config.SETTLEMENT_MARKER
        )

    # Groups
    def create_group(self, owner_id: int, name: str, icon: Optional[str] = None) -> int:
        """Create a group whose first member is the owner.

        Raises:
            NotFoundError: If the owner doesn't exist
            ValidationError: If the name is empty
        """
        name = name.strip()
        if not name:
            raise errors.ValidationError("Group name must not be empty")
        owner = self.db.get_user(owner_id)
        if owner is None:
            raise errors.NotFoundError(errors.user_not_found(owner_id))

        with self.db.transaction():
            group_id = self.db.create_group(owner_id=owner_id, name=name, icon=icon or DEFAULT_GROUP_ICON)
            self.db.add_group_member(group_id=group_id, name=owner.name, user_id=owner.id)

        logger.info("Created group %s for owner %s", group_id, owner_id)
        return group_id

    def get_group(self, group_id: int) -> Optional[GroupEntity]:
        """Get group by ID."""
        return self.db.get_group(group_id)

    def require_group(self, group_id: int) -> GroupEntity:
        """Get group by ID or raise NotFoundError."""
        group = self.db.get_group(group_id)
        if group is None:
            raise errors.NotFoundError(errors.group_not_found(group_id))
        return group

    def list_groups(self, owner_id: int) -> list[GroupEntity]:
        """List groups owned by a user, newest first."""
        return self.db.list_groups(owner_id)

    def get_group_detail(
        self, group_id: int, year: Optional[int] = None, month: Optional[int] = None
    ) -> GroupDetail:
        """Group with members and expenses, optionally limited to one month."""
        group = self.require_group(group_id)
        start, end = self._month_filter(year, month)
        return GroupDetail(
            group=group,
            members=tuple(self.db.list_group_members(group_id)),
            expenses=tuple(self.db.list_group_expenses(group_id, start_date=start, end_date=end)),
        )

    def delete_group(self, group_id: int, user_id: int) -> None:
        """Delete a group with its splits, expenses and members.

        Only the owner may delete a group. Rows are removed in dependency
        order inside one unit of work.

        Raises:
            NotFoundError: If the group doesn't exist
            PermissionDeniedError: If user_id is not the owner
        """
        group = self.require_group(group_id)
        if group.owner_id != user_id:
            raise errors.PermissionDeniedError(
                f"Only the owner can delete group {group_id}"
            )

        with self.db.transaction():
            expense_ids = self.db.list_group_expense_ids(group_id)
            self.db.delete_expense_splits(expense_ids)
            self.db.delete_group_expenses(group_id)
            self.db.delete_group_members(group_id)
            self.db.delete_group(group_id)

        logger.info("Deleted group %s with %s expenses", group_id, len(expense_ids))

    # Members
    def add_member(self, group_id: int, name_or_email: str) -> int:
        """Add a member by email (linked account) or by name (name-only).

        A value containing "@" is treated as an email and must belong to a
        registered user, whose name becomes the member name.

        Raises:
            NotFoundError: If the group or the email's user doesn't exist
            ValidationError: If the value is empty
        """
        self.require_group(group_id)
        value = name_or_email.strip()
        if not value:
            raise errors.ValidationError("Member name or email must not be empty")

        if "@" in value:
            user = self.db.get_user_by_email(value)
            if user is None:
                raise errors.NotFoundError(f"No registered user with email '{value}'")
            member_id = self.db.add_group_member(group_id=group_id, name=user.name, user_id=user.id)
        else:
            member_id = self.db.add_group_member(group_id=group_id, name=value, user_id=None)

        logger.info("Added member %s to group %s", member_id, group_id)
        return member_id

    def list_members(self, group_id: int) -> list[GroupMemberEntity]:
        """List members of a group."""
        self.require_group(group_id)
        return self.db.list_group_members(group_id)

    # Expenses
    def create_expense(
        self,
        group_id: int,
        description: str,
        amount: MoneyLike,
        payer_id: int,
        split_mode: Union[str, SplitMode] = SplitMode.EQUAL,
        participant_ids: Optional[Sequence[int]] = None,
        member_amounts: Optional[Iterable[tuple[int, MoneyLike]]] = None,
        date: Optional[date_type] = None,
    ) -> int:
        """Record a shared expense with its full split set.

        Args:
            group_id: Group ID
            description: Expense description (a blank settlement gets a
                generated one)
            amount: Positive total
            payer_id: Member who paid
            split_mode: EQUAL, MANUAL or FULL_REIMBURSE
            participant_ids: EQUAL only; members sharing the cost (default all)
            member_amounts: MANUAL only; (member_id, amount) pairs
            date: Occurrence date (defaults to today)

        Returns:
            Expense ID

        Raises:
            NotFoundError: If group, payer or a split member doesn't exist
            ValidationError: If amount, mode or splits are invalid
        """
        self.require_group(group_id)
        mode = parse_split_mode(split_mode)
        total, expense_date, text, plan = self._prepare_expense(
            group_id, description, amount, payer_id, mode, participant_ids, member_amounts, date
        )

        with self.db.transaction():
            expense_id = self.db.create_group_expense(
                group_id=group_id,
                description=text,
                amount=total,
                payer_id=payer_id,
                date=expense_date,
                split_mode=mode,
                is_settlement=mode is SplitMode.FULL_REIMBURSE,
            )
            self.db.add_expense_splits(expense_id, plan)

        logger.info(
            "Created %s expense %s of %s in group %s", mode.value, expense_id, total, group_id
        )
        return expense_id

    def update_expense(
        self,
        expense_id: int,
        description: str,
        amount: MoneyLike,
        payer_id: int,
        split_mode: Union[str, SplitMode] = SplitMode.EQUAL,
        participant_ids: Optional[Sequence[int]] = None,
        member_amounts: Optional[Iterable[tuple[int, MoneyLike]]] = None,
        date: Optional[date_type] = None,
    ) -> None:
        """Replace an expense and its whole split set.

        Prior splits are discarded and a fresh set is computed; this is not a
        field-level patch. The date is kept when not given.

        Raises:
            NotFoundError: If expense, payer or a split member doesn't exist
            ValidationError: If amount, mode or splits are invalid
        """
        existing = self.require_expense(expense_id)
        mode = parse_split_mode(split_mode)
        total, expense_date, text, plan = self._prepare_expense(
            existing.group_id,
            description,
            amount,
            payer_id,
            mode,
            participant_ids,
            member_amounts,
            date or existing.date,
        )

        with self.db.transaction():
            self.db.delete_expense_splits([expense_id])
            self.db.add_expense_splits(expense_id, plan)
            self.db.update_group_expense(
                expense_id=expense_id,
                description=text,
                amount=total,
                payer_id=payer_id,
                date=expense_date,
                split_mode=mode,
                is_settlement=mode is SplitMode.FULL_REIMBURSE,
            )

        logger.info("Replaced expense %s with %s split of %s", expense_id, mode.value, total)

    def get_expense(self, expense_id: int) -> Optional[GroupExpenseEntity]:
        """Get group expense with splits."""
        return self.db.get_group_expense(expense_id)

    def require_expense(self, expense_id: int) -> GroupExpenseEntity:
        """Get group expense or raise NotFoundError."""
        expense = self.db.get_group_expense(expense_id)
        if expense is None:
            raise errors.NotFoundError(errors.expense_not_found(expense_id))
        return expense

    def list_expenses(
        self,
        group_id: int,
        period_start: Optional[date_type] = None,
        period_end: Optional[date_type] = None,
    ) -> list[GroupExpenseEntity]:
        """List group expenses in a period, newest first."""
        self.require_group(group_id)
        return self.db.list_group_expenses(group_id, start_date=period_start, end_date=period_end)

    # Balances
    def is_settlement(self, expense: GroupExpenseEntity) -> bool:
        """Whether an expense counts as a settlement entry."""
        return is_settlement(expense, self.settlement_marker)

    def compute_outstanding_balance(
        self,
        group_id: int,
        period_start: Optional[date_type] = None,
        period_end: Optional[date_type] = None,
    ) -> Money:
        """Aggregate debt still open in a group.

        Sum of non-settlement expenses minus sum of settlement entries in the
        period, clamped at zero.
        """
        expenses = self.list_expenses(group_id, period_start, period_end)
        total_expenses = Money.total(e.amount for e in expenses if not self.is_settlement(e))
        total_reimbursed = Money.total(e.amount for e in expenses if self.is_settlement(e))
        outstanding = total_expenses - total_reimbursed
        return outstanding if outstanding.is_positive() else Money.zero()

    def member_positions(
        self,
        group_id: int,
        period_start: Optional[date_type] = None,
        period_end: Optional[date_type] = None,
    ) -> list[MemberPosition]:
        """Paid versus owed per member over the period's expenses."""
        members = self.list_members(group_id)
        paid = {member.id: Money.zero() for member in members}
        owed = {member.id: Money.zero() for member in members}

        for expense in self.db.list_group_expenses(group_id, start_date=period_start, end_date=period_end):
            if expense.payer_id in paid:
                paid[expense.payer_id] += expense.amount
            for split in expense.splits:
                if split.member_id in owed:
                    owed[split.member_id] += split.amount

        return [
            MemberPosition(member_id=m.id, name=m.name, paid=paid[m.id], owed=owed[m.id])
            for m in members
        ]

    def _prepare_expense(
        self,
        group_id: int,
        description: str,
        amount: MoneyLike,
        payer_id: int,
        mode: SplitMode,
        participant_ids: Optional[Sequence[int]],
        member_amounts: Optional[Iterable[tuple[int, MoneyLike]]],
        date: Optional[date_type],
    ):
        """Validate expense input and compute its split plan."""
        total = Money.of(amount)
        if not total.is_positive():
            raise errors.ValidationError(f"Amount must be positive, got {total}")

        member_ids = [member.id for member in self.db.list_group_members(group_id)]
        if payer_id not in member_ids:
            raise errors.NotFoundError(errors.member_not_found(payer_id, group_id))

        expense_date = date or date_type.today()
        text = (description or "").strip()
        if not text:
            if mode is not SplitMode.FULL_REIMBURSE:
                raise errors.ValidationError("Expense description must not be empty")
            text = f"{self.settlement_marker.capitalize()} {expense_date:%Y-%m}"

        plan = plan_splits(
            mode,
            total,
            payer_id,
            member_ids,
            participant_ids=participant_ids,
            member_amounts=member_amounts,
        )
        return total, expense_date, text, plan

    @staticmethod
    def _month_filter(
        year: Optional[int], month: Optional[int]
    ) -> tuple[Optional[date_type], Optional[date_type]]:
        if year is None and month is None:
            return None, None
        if year is None or month is None:
            raise errors.ValidationError("Year and month must be given together")
        try:
            return month_range(year, month)
        except ValueError as e:
            raise errors.ValidationError(str(e))
