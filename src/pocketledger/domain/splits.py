"""Split arithmetic for group expenses.

Pure functions: they take an expense total and participants and return the
(member_id, amount) pairs to persist. Validation failures raise
ValidationError before anything is written.
"""

from typing import Iterable, Optional, Sequence

from pocketledger.domain.entities import SplitMode
from pocketledger.domain.errors import NotFoundError, ValidationError
from pocketledger.domain.money import Money, MoneyLike

# Largest accepted gap between a manual split set and the expense total
MANUAL_SPLIT_TOLERANCE = Money(1)

SplitPlan = list[tuple[int, Money]]


def _unique_ids(member_ids: Iterable[int]) -> list[int]:
    ids = list(member_ids)
    if len(set(ids)) != len(ids):
        raise ValidationError("A member may appear only once in a split")
    return ids


def equal_splits(amount: Money, participant_ids: Sequence[int]) -> SplitPlan:
    """Charge every participant an equal share, payer included.

    The division remainder (in minor units) goes to the first participant.
    """
    participants = _unique_ids(participant_ids)
    if not participants:
        raise ValidationError("Cannot split an expense among zero participants")
    shares = amount.split_evenly(len(participants))
    return list(zip(participants, shares))


def full_reimburse_splits(amount: Money, member_ids: Sequence[int], payer_id: int) -> SplitPlan:
    """Settlement split: every member except the payer owes an equal share.

    The payer gets a zero split. The remainder goes to the first debtor.
    """
    members = _unique_ids(member_ids)
    debtors = [member_id for member_id in members if member_id != payer_id]
    if not debtors:
        raise ValidationError("A settlement needs at least one member besides the payer")
    shares = dict(zip(debtors, amount.split_evenly(len(debtors))))
    return [(member_id, shares.get(member_id, Money.zero())) for member_id in members]


def manual_splits(amount: Money, splits: Iterable[tuple[int, MoneyLike]]) -> SplitPlan:
    """Validate caller-supplied splits against the expense total.

    Raises:
        ValidationError: On an empty set, duplicate or negative splits, or a
            sum more than MANUAL_SPLIT_TOLERANCE away from the total
    """
    plan = [(member_id, Money.of(split_amount)) for member_id, split_amount in splits]
    if not plan:
        raise ValidationError("Manual split requires at least one member amount")
    _unique_ids(member_id for member_id, _ in plan)
    if any(split_amount.is_negative() for _, split_amount in plan):
        raise ValidationError("Split amounts must not be negative")

    split_total = Money.total(split_amount for _, split_amount in plan)
    if abs(split_total - amount) > MANUAL_SPLIT_TOLERANCE:
        raise ValidationError(
            f"Split sum mismatch: splits add up to {split_total}, expense total is {amount}"
        )
    return plan


def plan_splits(
    split_mode: SplitMode,
    amount: Money,
    payer_id: int,
    group_member_ids: Sequence[int],
    participant_ids: Optional[Sequence[int]] = None,
    member_amounts: Optional[Iterable[tuple[int, MoneyLike]]] = None,
) -> SplitPlan:
    """Compute the split set for an expense in the given mode.

    Args:
        split_mode: EQUAL, MANUAL or FULL_REIMBURSE
        amount: Expense total
        payer_id: Member who paid
        group_member_ids: All members of the group, ordered by ID
        participant_ids: EQUAL only; defaults to all group members
        member_amounts: MANUAL only; (member_id, amount) pairs

    Raises:
        ValidationError: If the inputs don't fit the mode
        NotFoundError: If a split names a member outside the group
    """
    known = set(group_member_ids)

    if split_mode is SplitMode.EQUAL:
        participants = list(participant_ids) if participant_ids else list(group_member_ids)
        plan = equal_splits(amount, participants)
    elif split_mode is SplitMode.MANUAL:
        if member_amounts is None:
            raise ValidationError("Manual split requires member amounts")
        plan = manual_splits(amount, member_amounts)
    elif split_mode is SplitMode.FULL_REIMBURSE:
        plan = full_reimburse_splits(amount, group_member_ids, payer_id)
    else:
        raise ValidationError(f"Unsupported split mode '{split_mode}'")

    unknown = sorted(member_id for member_id, _ in plan if member_id not in known)
    if unknown:
        raise NotFoundError(
            f"Members {', '.join(str(member_id) for member_id in unknown)} are not part of the group"
        )
    return plan
